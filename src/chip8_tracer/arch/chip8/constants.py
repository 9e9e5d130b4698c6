# src/chip8_tracer/arch/chip8/constants.py
"""
CHIP-8 のメモリレイアウトと組み込みグリフテーブルの定義。
"""

# @intent:constant アドレス空間全体のサイズ。
MEM_SIZE = 4096

# @intent:constant メモリレイアウト。
#   0x000-0x04F グリフテーブル (ROM)
#   0x200-0xE9F プログラム領域
#   0xEA0-0xEFF コールスタック (48エントリ)
#   0xF00-0xFFF 予約 (表示領域)
GLYPH_OFFSET = 0x000
GLYPH_HEIGHT = 5
PROGRAM_OFFSET = 0x200
DISPLAY_OFFSET = MEM_SIZE - 256
STACK_OFFSET = DISPLAY_OFFSET - 96
STACK_END = DISPLAY_OFFSET
PROGRAM_WINDOW_SIZE = STACK_OFFSET - PROGRAM_OFFSET

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

NUM_REGISTERS = 16
NUM_KEYS = 16
FLAG_REG = 0xF

# 0-F の16進数字グリフ (各5バイト、上位4ビットのみ使用)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
GLYPH_TABLE_SIZE = len(FONTSET)
