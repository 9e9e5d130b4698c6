# src/chip8_tracer/arch/chip8/framebuffer.py
"""
64x32 モノクロフレームバッファ。
"""
from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# @intent:responsibility 1ピクセル1バイト(0/1)のセル配列と、ホストへ再描画を促すダーティフラグを保持します。
class Framebuffer:
    """
    セルは描画命令のXORによってのみ反転します。
    dirtyフラグはセルが変化し得た時にセットされ、ホストが表示後に明示的にクリアします。
    """
    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self.dirty = False

    # @intent:responsibility ホスト向けの読み取り専用ビューを返します。
    @property
    def cells(self) -> bytes:
        return bytes(self._cells)

    def get_pixel(self, x: int, y: int) -> int:
        return self._cells[y * self.width + x]

    # @intent:responsibility セルをXORで反転し、反転前にセットされていたか（衝突）を返します。
    # @intent:pre-condition 0 <= x < width, 0 <= y < height（クリッピングは呼び出し側の責務）。
    def xor_pixel(self, x: int, y: int) -> bool:
        index = y * self.width + x
        collided = self._cells[index] == 1
        self._cells[index] ^= 1
        return collided

    def clear(self) -> None:
        self._cells = bytearray(self.width * self.height)
        self.dirty = True

    # @intent:responsibility 行ごとのセル列を返します（テキスト表示やテスト用）。
    def rows(self):
        for y in range(self.height):
            yield self._cells[y * self.width:(y + 1) * self.width]
