# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.arch.chip8.constants import PROGRAM_OFFSET, STACK_OFFSET, NUM_REGISTERS, FLAG_REG

# @intent:responsibility CHIP-8のレジスタファイル（V0-VF, I, PC, SP）とタイマの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFはキャリー/ボロー/衝突フラグとして命令により上書きされます。
    """
    pc: int = PROGRAM_OFFSET
    sp: int = STACK_OFFSET
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0x000          # Index Register (16bit)
    delay_timer: int = 0
    sound_timer: int = 0

    # @intent:accessor フラグレジスタVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REG]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REG] = value & 0xFF
