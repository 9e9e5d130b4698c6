"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.core.errors import IllegalInstruction
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import OpKind, Chip8Operation, Chip8Devices
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 16bitの命令ワードをデコードします。
# @intent:rationale 全域かつ純粋な関数です。認識できないワードは例外ではなくINVALIDとして返します。
def decode_opcode(word: int) -> Chip8Operation:
    word &= 0xFFFF
    return DECODE_MAP[word >> 12](word)

# @intent:responsibility デコードされた命令を実行し、CPUの状態を変更します。
# @intent:post-condition INVALID（実行関数なし）の場合、IllegalInstructionを送出します。
def execute_instruction(operation: Chip8Operation, state: Chip8CpuState, bus: Bus,
                        devices: Chip8Devices, address: int) -> None:
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        raise IllegalInstruction(operation.word, address)
    executor(state, bus, operation, devices)
