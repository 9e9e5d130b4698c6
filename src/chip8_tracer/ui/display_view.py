# src/chip8_tracer/ui/display_view.py
"""
CHIP-8のフレームバッファ（64x32 モノクロ）を表示するウィジェット。
"""
from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QImage, QPainter, QColor
from PySide6.QtCore import QSize

from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# @intent:responsibility フレームバッファをQImageへラスタライズし、整数倍に拡大して描画します。
class DisplayView(QWidget):
    """
    フレームバッファの表示ウィジェット。
    update_frame() で受け取ったセル列（各セル0/1）を前景色・背景色で塗り分けます。
    """
    def __init__(self, scale: int = 10, foreground: str = "#33FF66", background: str = "#101010", parent=None):
        super().__init__(parent)
        self._scale = max(1, scale)
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._image = QImage(SCREEN_WIDTH, SCREEN_HEIGHT, QImage.Format_RGB32)
        self._image.fill(self._background)
        self._cells = bytes(SCREEN_WIDTH * SCREEN_HEIGHT)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(SCREEN_WIDTH * self._scale, SCREEN_HEIGHT * self._scale)

    @property
    def scale(self) -> int:
        return self._scale

    def set_scale(self, scale: int) -> None:
        self._scale = max(1, scale)
        self.setFixedSize(self.sizeHint())
        self.update()

    # @intent:responsibility 色設定を変更し、現在のセル内容で再ラスタライズします。
    def set_colors(self, foreground: str, background: str) -> None:
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self.update_frame(self._cells)

    # @intent:pre-condition cellsは SCREEN_WIDTH * SCREEN_HEIGHT バイトの行優先配列です。
    def update_frame(self, cells: bytes) -> None:
        if len(cells) != SCREEN_WIDTH * SCREEN_HEIGHT:
            raise ValueError(f"Frame must be {SCREEN_WIDTH * SCREEN_HEIGHT} cells, got {len(cells)}")
        self._cells = bytes(cells)
        on = self._foreground.rgb()
        off = self._background.rgb()
        for y in range(SCREEN_HEIGHT):
            row = y * SCREEN_WIDTH
            for x in range(SCREEN_WIDTH):
                self._image.setPixel(x, y, on if self._cells[row + x] else off)
        self.update()

    def image(self) -> QImage:
        return self._image

    def paintEvent(self, event):
        painter = QPainter(self)
        # ドットの輪郭をぼかさないよう、スムージングなしで拡大する
        painter.drawImage(self.rect(), self._image)
        painter.end()
