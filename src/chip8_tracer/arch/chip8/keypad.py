# src/chip8_tracer/arch/chip8/keypad.py
"""
16キーの入力ラッチ。
"""
from typing import Optional

from chip8_tracer.arch.chip8.constants import NUM_KEYS

# @intent:responsibility 現在押下されているキーを16bitのビットマスクとして保持します。
# @intent:rationale ラッチはホストからのイベントでのみ変化し、命令は読み取るだけです。
class Keypad:
    def __init__(self):
        self.mask = 0

    # @intent:pre-condition keyは0-15である必要があります。範囲外は呼び出し側（キーマップ層）の契約違反です。
    def _check(self, key: int) -> None:
        if not isinstance(key, int) or not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key {key!r} is not a valid key index (0-{NUM_KEYS - 1}).")

    def key_down(self, key: int) -> None:
        self._check(key)
        self.mask |= 1 << key

    def key_up(self, key: int) -> None:
        self._check(key)
        self.mask &= ~(1 << key)

    def is_held(self, key: int) -> bool:
        return (self.mask >> (key & 0xF)) & 1 == 1

    # @intent:responsibility 押下中のキーのうち最小のインデックスを返します。押下がなければNone。
    def first_held(self) -> Optional[int]:
        if self.mask == 0:
            return None
        return (self.mask & -self.mask).bit_length() - 1
