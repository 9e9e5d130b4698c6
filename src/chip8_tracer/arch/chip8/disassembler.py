# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上またはファイル上のバイナリを解析し、CHIP-8のニーモニックに変換します。
デコーダ（decode_opcode）は純粋関数なので、そのまま再利用します。
バスアクセスログを汚さないように、メモリ読み出しにはpeekを使用します。
"""
from typing import Iterator, List, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.instructions import decode_opcode

Line = Tuple[int, str, str]

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Line]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        # 命令ワードの2バイト目がアドレス空間外なら終了
        if not (bus.is_mapped(current_addr) and bus.is_mapped(current_addr + 1)):
            break
        word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(word)
        result.append((current_addr, operation.opcode_hex, operation.text()))
        current_addr += operation.length

    return result

# @intent:responsibility メモリにロードされていない生のプログラムイメージを逆アセンブルします。
def disassemble_image(data: bytes, base: int = 0) -> List[Line]:
    """
    イメージ先頭から連続した偶数オフセットの各ワードをデコードします。
    末尾の半端な1バイトは DB 疑似命令として出力します。
    """
    result = []
    for offset in range(0, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        operation = decode_opcode(word)
        result.append((base + offset, operation.opcode_hex, operation.text()))
    if len(data) % 2:
        last = data[-1]
        result.append((base + len(data) - 1, f"{last:02X}", f"DB ${last:02X}"))
    return result

# @intent:responsibility 1行分のリスティング文字列（"address: word | mnemonic"）を生成します。アドレスとワードは小文字16進です。
def format_line(line: Line) -> str:
    address, hex_word, text = line
    return f"{address:06x}:\t{hex_word.lower()}\t|\t{text}"

def format_listing(lines: List[Line]) -> Iterator[str]:
    for line in lines:
        yield format_line(line)
