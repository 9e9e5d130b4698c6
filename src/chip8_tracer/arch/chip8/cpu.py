# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール（インタプリタコア）。

ホストは step() を1命令ごとに呼び出し、draw と running をポーリングします。
タイマの減算（dec_timers）とキーイベント（key_down / key_up）はホストが独自の周期で呼び出します。
"""
import copy
import random
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.errors import LoadFault
from chip8_tracer.core.snapshot import Operation, Metadata, Snapshot
from chip8_tracer.transport.bus import Bus, RAM, ROM
from chip8_tracer.arch.chip8.constants import (
    MEM_SIZE, GLYPH_OFFSET, GLYPH_TABLE_SIZE, FONTSET, PROGRAM_OFFSET, PROGRAM_WINDOW_SIZE, NUM_REGISTERS,
)
from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction, Chip8Devices
from chip8_tracer.arch.chip8 import disassembler


# @intent:responsibility CHIP-8のメモリマップ（グリフROM + RAM）を持つバスを生成します。
def create_bus() -> Bus:
    bus = Bus()
    bus.register_device(GLYPH_OFFSET, GLYPH_OFFSET + GLYPH_TABLE_SIZE - 1, ROM(GLYPH_TABLE_SIZE))
    bus.register_device(GLYPH_OFFSET + GLYPH_TABLE_SIZE, MEM_SIZE - 1, RAM(MEM_SIZE - GLYPH_TABLE_SIZE))
    return bus


# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    全てのマシン状態（レジスタ、メモリ、フレームバッファ、入力ラッチ、タイマ）を排他的に所有します。
    インスタンス間で共有する状態はなく、乱数生成器もインスタンスごとに持ちます。
    """
    def __init__(self, bus: Optional[Bus] = None, seed: Optional[int] = None):
        self._devices = Chip8Devices(
            framebuffer=Framebuffer(),
            keypad=Keypad(),
            rng=random.Random(seed),
        )
        super().__init__(bus if bus is not None else create_bus())
        # グリフテーブルは構築時に一度だけ書き込む
        self._bus.load_block(GLYPH_OFFSET, FONTSET)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタ、タイマ、フレームバッファ、サイクルカウンタを初期状態に戻します。
    # @intent:rationale メモリ（ロード済みプログラム）と押下中のキーは保持します。
    def reset(self) -> None:
        super().reset()
        self._devices.framebuffer.clear()

    # @intent:responsibility プログラムイメージをプログラム領域へ一括で書き込みます。
    # @intent:pre-condition イメージはプログラム領域のサイズ以下である必要があります。
    # @intent:post-condition サイズ超過時はLoadFaultを送出し、メモリは一切変更されません。
    def load(self, data: bytes) -> None:
        """
        生のビッグエンディアン命令列を PROGRAM_OFFSET から書き込みます。
        領域の残りはゼロで埋めます。レジスタの初期化が必要な場合は呼び出し側がreset()を呼びます。
        """
        if len(data) > PROGRAM_WINDOW_SIZE:
            raise LoadFault(
                f"Program image is {len(data)} bytes; the program window holds {PROGRAM_WINDOW_SIZE} bytes.",
                size=len(data), limit=PROGRAM_WINDOW_SIZE,
            )
        image = bytes(data) + bytes(PROGRAM_WINDOW_SIZE - len(data))
        self._bus.load_block(PROGRAM_OFFSET, image)

    # @intent:responsibility PCから2バイトをビッグエンディアンでフェッチします。範囲外はMemoryFault。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation, initial_pc: int) -> None:
        execute_instruction(operation, self._state, self._bus, self._devices, initial_pc)

    # @intent:responsibility HALT後はフェッチを行わず、状態を変更しないスナップショットを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if not self._state.halted:
            return None
        operation = Operation(opcode_hex="----", mnemonic="HALT (halted)", cycle_count=0, length=0)
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=operation.mnemonic),
            bus_activity=[]
        )

    # --- 入力ラッチ ---
    def key_down(self, key: int) -> None:
        self._devices.keypad.key_down(key)

    def key_up(self, key: int) -> None:
        self._devices.keypad.key_up(key)

    def is_key_held(self, key: int) -> bool:
        return self._devices.keypad.is_held(key)

    @property
    def keys(self) -> int:
        return self._devices.keypad.mask

    # --- タイマ ---
    # @intent:responsibility 遅延タイマとサウンドタイマをそれぞれ1減算します（下限0）。
    # @intent:return サウンドタイマが1から0へ遷移するこの呼び出しでのみTrue（ブザーを鳴らすべき合図）。
    def dec_timers(self) -> bool:
        """
        ホストが固定の実時間周期（通常60Hz）で呼び出します。step()からは呼ばれません。
        """
        state = self._state
        tone = state.sound_timer == 1
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1
        return tone

    # --- フレームバッファ ---
    @property
    def framebuffer(self) -> bytes:
        """64x32セルの読み取り専用ビュー（各セル0/1）。"""
        return self._devices.framebuffer.cells

    @property
    def draw(self) -> bool:
        """描画が完了し、ホストが表示すべき状態であることを示すダーティフラグ。"""
        return self._devices.framebuffer.dirty

    @draw.setter
    def draw(self, value: bool) -> None:
        self._devices.framebuffer.dirty = value

    def clear_draw_flag(self) -> None:
        self._devices.framebuffer.dirty = False

    def get_bus(self) -> Bus:
        return self._bus

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(NUM_REGISTERS)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer})
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 16)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility UI表示用に、フラグと実行状態を辞書形式で提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {
            "VF": self._state.vf != 0,
            "DRAW": self.draw,
            "HALT": self._state.halted,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
