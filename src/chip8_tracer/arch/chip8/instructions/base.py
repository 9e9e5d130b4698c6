# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義とユーティリティ。

命令は閉じた種別（OpKind）と、16bitワードから切り出したフィールドを持つ
不変のChip8Operationとして表現されます。
"""
import random
from dataclasses import dataclass
from enum import Enum

from chip8_tracer.core.errors import MemoryFault, StackFault
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.constants import STACK_OFFSET, STACK_END
from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.state import Chip8CpuState


# @intent:data_structure 命令の種別。INVALIDには実行関数が存在しません。
class OpKind(Enum):
    CLS = "CLS"
    RET = "RET"
    SYS = "SYS"
    JP = "JP"
    CALL = "CALL"
    SE_IMM = "SE_IMM"
    SNE_IMM = "SNE_IMM"
    SE_REG = "SE_REG"
    LD_IMM = "LD_IMM"
    ADD_IMM = "ADD_IMM"
    MOV = "MOV"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD = "ADD"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_REG = "SNE_REG"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT = "LD_DT"
    LD_ST = "LD_ST"
    ADD_I = "ADD_I"
    LD_F = "LD_F"
    LD_B = "LD_B"
    LD_MEM_REGS = "LD_MEM_REGS"
    LD_REGS_MEM = "LD_REGS_MEM"
    HALT = "HALT"
    INVALID = "INVALID"


# @intent:map 種別ごとのニーモニックとオペランド書式。
OPERAND_FORMATS = {
    OpKind.CLS: ("CLS", ()),
    OpKind.RET: ("RET", ()),
    OpKind.SYS: ("SYS", ("${nnn:03X}",)),
    OpKind.JP: ("JP", ("${nnn:03X}",)),
    OpKind.CALL: ("CALL", ("${nnn:03X}",)),
    OpKind.SE_IMM: ("SE", ("V{x:X}", "${nn:02X}")),
    OpKind.SNE_IMM: ("SNE", ("V{x:X}", "${nn:02X}")),
    OpKind.SE_REG: ("SE", ("V{x:X}", "V{y:X}")),
    OpKind.LD_IMM: ("LD", ("V{x:X}", "${nn:02X}")),
    OpKind.ADD_IMM: ("ADD", ("V{x:X}", "${nn:02X}")),
    OpKind.MOV: ("LD", ("V{x:X}", "V{y:X}")),
    OpKind.OR: ("OR", ("V{x:X}", "V{y:X}")),
    OpKind.AND: ("AND", ("V{x:X}", "V{y:X}")),
    OpKind.XOR: ("XOR", ("V{x:X}", "V{y:X}")),
    OpKind.ADD: ("ADD", ("V{x:X}", "V{y:X}")),
    OpKind.SUB: ("SUB", ("V{x:X}", "V{y:X}")),
    OpKind.SHR: ("SHR", ("V{x:X}",)),
    OpKind.SUBN: ("SUBN", ("V{x:X}", "V{y:X}")),
    OpKind.SHL: ("SHL", ("V{x:X}",)),
    OpKind.SNE_REG: ("SNE", ("V{x:X}", "V{y:X}")),
    OpKind.LD_I: ("LD", ("I", "${nnn:03X}")),
    OpKind.JP_V0: ("JP", ("V0", "${nnn:03X}")),
    OpKind.RND: ("RND", ("V{x:X}", "${nn:02X}")),
    OpKind.DRW: ("DRW", ("V{x:X}", "V{y:X}", "{n}")),
    OpKind.SKP: ("SKP", ("V{x:X}",)),
    OpKind.SKNP: ("SKNP", ("V{x:X}",)),
    OpKind.LD_VX_DT: ("LD", ("V{x:X}", "DT")),
    OpKind.LD_VX_K: ("LD", ("V{x:X}", "K")),
    OpKind.LD_DT: ("LD", ("DT", "V{x:X}")),
    OpKind.LD_ST: ("LD", ("ST", "V{x:X}")),
    OpKind.ADD_I: ("ADD", ("I", "V{x:X}")),
    OpKind.LD_F: ("LD", ("F", "V{x:X}")),
    OpKind.LD_B: ("LD", ("B", "V{x:X}")),
    OpKind.LD_MEM_REGS: ("LD", ("[I]", "V{x:X}")),
    OpKind.LD_REGS_MEM: ("LD", ("V{x:X}", "[I]")),
    OpKind.HALT: ("HALT", ()),
    OpKind.INVALID: ("???", ("${word:04X}",)),
}


# @intent:responsibility デコード済みのCHIP-8命令を表す不変のタグ付きバリアント。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    kind: OpKind = OpKind.INVALID
    word: int = 0
    x: int = 0
    y: int = 0
    n: int = 0
    nn: int = 0
    nnn: int = 0


# @intent:utility_function 命令ワードの各フィールドを切り出し、Chip8Operationを生成します。
def make_operation(kind: OpKind, word: int) -> Chip8Operation:
    fields = dict(
        word=word,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )
    mnemonic, formats = OPERAND_FORMATS[kind]
    operands = tuple(fmt.format(**fields) for fmt in formats)
    return Chip8Operation(f"{word:04X}", mnemonic, operands, kind=kind, **fields)


# @intent:data_structure 命令が操作するCPU外部の状態コンテナ群。
@dataclass
class Chip8Devices:
    framebuffer: Framebuffer
    keypad: Keypad
    rng: random.Random


# @intent:utility_function 連続したアドレス範囲が全てマップ済みであることを、書き込み前に検証します。
def check_range(bus: Bus, start: int, count: int) -> None:
    for address in range(start, start + count):
        if not bus.is_mapped(address):
            raise MemoryFault(f"Address {address:#06x} out of bounds.", address)


# @intent:utility_function 分岐先が命令を2バイトともフェッチ可能な位置であることを検証します。
def check_pc_target(bus: Bus, target: int) -> None:
    if not (bus.is_mapped(target) and bus.is_mapped(target + 1)):
        raise MemoryFault(f"Branch target {target:#06x} is outside of memory.", target)


# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    return (bus.read(addr) << 8) | bus.read(addr + 1)


# @intent:utility_function バスへ16ビットワードをビッグエンディアン形式で書き込みます。
def write_word(bus: Bus, addr: int, val: int) -> None:
    bus.write(addr, (val >> 8) & 0xFF)
    bus.write(addr + 1, val & 0xFF)


# @intent:utility_function 戻りアドレスをコールスタックへプッシュします。SPは2増加します。
def push_word(state: Chip8CpuState, bus: Bus, val: int) -> None:
    if state.sp + 2 > STACK_END:
        raise StackFault(f"Stack overflow at SP={state.sp:#06x}", state.sp)
    write_word(bus, state.sp, val)
    state.sp += 2


# @intent:utility_function コールスタックの先頭を読み出します（SPは変更しません）。
def peek_return_address(state: Chip8CpuState, bus: Bus) -> int:
    if state.sp - 2 < STACK_OFFSET:
        raise StackFault(f"Stack underflow at SP={state.sp:#06x}", state.sp)
    return read_word(bus, state.sp - 2)
