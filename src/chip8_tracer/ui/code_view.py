"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Optional, Tuple
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.ui.fonts import get_monospace_font

HIGHLIGHT_COLOR = QColor("#404000")
NORMAL_COLOR = QColor("#101010")

# @intent:responsibility 逆アセンブルされたコードを表形式で表示し、現在のPCをハイライトするUIウィジェットを提供します。
class CodeView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Word", "Mnemonic"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB; gridline-color: #303030;")
        self.layout.addWidget(self.table)

        self._cpu: Optional[AbstractCpu] = None
        self.window_size = 512 # 1回の逆アセンブルで扱うバイト数
        self.highlighted_row = -1
        # 現在表示している逆アセンブルデータ [(addr, word, mnemonic), ...]
        self.disassembled_data: List[Tuple[int, str, str]] = []

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self.reset_cache()

    # @intent:responsibility 指定されたPC周辺のメモリを逆アセンブルして表示を更新します。
    def update_code(self, pc: int):
        """
        PCが現在の表示範囲内にあれば、再逆アセンブルせずにハイライト移動のみ行います。
        命令は2バイト境界に並ぶとは限らないため、範囲内判定はアドレスの完全一致で行います。
        """
        if self._cpu is None:
            return

        row_index = self._find_row(pc)
        if row_index == -1:
            self.disassembled_data = self._cpu.disassemble(pc, self.window_size)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, word, mnemonic) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:04X}"))
                self.table.setItem(row, 1, QTableWidgetItem(word))
                self.table.setItem(row, 2, QTableWidgetItem(mnemonic))
            row_index = self._find_row(pc)

        self._highlight(row_index)

    def _find_row(self, pc: int) -> int:
        for i, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return i
        return -1

    def _highlight(self, row_index: int) -> None:
        if 0 <= self.highlighted_row < self.table.rowCount():
            self._paint_row(self.highlighted_row, NORMAL_COLOR)
        self.highlighted_row = row_index
        if row_index == -1:
            return

        self._paint_row(row_index, HIGHLIGHT_COLOR)
        # 先の数行が常に見えるようにスクロールする
        self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)
        look_ahead_index = min(row_index + 5, self.table.rowCount() - 1)
        if look_ahead_index > row_index:
            self.table.scrollToItem(self.table.item(look_ahead_index, 0), QTableWidget.EnsureVisible)

    def _paint_row(self, row: int, color: QColor) -> None:
        for column in range(self.table.columnCount()):
            item = self.table.item(row, column)
            if item is not None:
                item.setBackground(color)

    # @intent:responsibility 内部キャッシュをクリアします。プログラムをロードし直した後に呼び出します。
    def reset_cache(self):
        self.disassembled_data = []
        self.highlighted_row = -1
        self.table.setRowCount(0)
