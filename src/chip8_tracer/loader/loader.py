# chip8_tracer/loader/loader.py
"""
プログラムローダーモジュール。
生のバイナリイメージ（.ch8）および Intel HEX 形式のロードをサポートします。
"""
from typing import Dict

from chip8_tracer.core.errors import LoadFault
from chip8_tracer.arch.chip8.constants import PROGRAM_OFFSET, PROGRAM_WINDOW_SIZE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu


class BinaryLoader:
    """
    生のビッグエンディアン命令列をそのままプログラム領域へロードするローダー。
    """
    # @intent:post-condition ロード後にCPUはリセットされ、PCはPROGRAM_OFFSETを指します。
    def load_binary(self, file_path: str, cpu: Chip8Cpu) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        cpu.load(data)
        cpu.reset()
        return len(data)


class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、データをプログラム領域にロードするローダー。
    """
    # @intent:responsibility 全レコードを検証してからメモリへ反映します。途中で失敗した場合メモリは変更されません。
    def load_intel_hex(self, file_path: str, cpu: Chip8Cpu) -> int:
        image = self.parse_intel_hex(file_path)
        window_end = PROGRAM_OFFSET + PROGRAM_WINDOW_SIZE
        for address in image:
            if not PROGRAM_OFFSET <= address < window_end:
                raise LoadFault(
                    f"Intel HEX data at {address:#06x} is outside the program window "
                    f"({PROGRAM_OFFSET:#06x}-{window_end - 1:#06x}).",
                    size=len(image), limit=PROGRAM_WINDOW_SIZE,
                )

        data = bytearray(max(image) - PROGRAM_OFFSET + 1 if image else 0)
        for address, value in image.items():
            data[address - PROGRAM_OFFSET] = value
        cpu.load(bytes(data))
        cpu.reset()
        return len(image)

    # @intent:responsibility Intel HEXファイルを {アドレス: バイト} の辞書へ変換します。
    def parse_intel_hex(self, file_path: str) -> Dict[int, int]:
        image: Dict[int, int] = {}
        current_extended_linear_address = 0x0000

        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line or not line.startswith(':'):
                    continue

                comment_start = line.find(';')
                if comment_start != -1:
                    line = line[:comment_start].strip()

                if len(line) < 11:
                    raise ValueError(f"Invalid Intel HEX record format on line {line_num}: Too short - {line}")

                try:
                    data_length = int(line[1:3], 16)
                    address_field = int(line[3:7], 16)
                    record_type = int(line[7:9], 16)
                    data_part_str = line[9:-2]
                    checksum_field = int(line[-2:], 16)
                except ValueError as e:
                    raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

                if len(data_part_str) != data_length * 2:
                    raise ValueError(f"Data length mismatch on line {line_num}")

                try:
                    data_bytes = bytes.fromhex(data_part_str)
                except ValueError as e:
                    raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

                checksum_sum = data_length + (address_field >> 8) + (address_field & 0xFF) + record_type
                checksum_sum += sum(data_bytes)
                calculated_checksum = (~checksum_sum + 1) & 0xFF

                if calculated_checksum != checksum_field:
                    raise ValueError(
                        f"Checksum mismatch on line {line_num}: "
                        f"Calculated {calculated_checksum:02X}, Expected {checksum_field:02X}"
                    )

                if record_type == 0x00:
                    load_address = (current_extended_linear_address + address_field) & 0xFFFFFFFF
                    for i, byte_data in enumerate(data_bytes):
                        image[load_address + i] = byte_data
                elif record_type == 0x01:
                    break
                elif record_type == 0x04:
                    current_extended_linear_address = int(data_part_str, 16) << 16
                elif record_type == 0x02:
                    current_extended_linear_address = int(data_part_str, 16) << 4
                elif record_type == 0x03 or record_type == 0x05:
                    # 開始アドレスレコード。CHIP-8は常にPROGRAM_OFFSETから開始するため無視する
                    pass
                else:
                    raise ValueError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        return image
