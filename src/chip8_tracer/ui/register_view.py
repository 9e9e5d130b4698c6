# src/chip8_tracer/ui/register_view.py
"""
CPUのレジスタとフラグを表示するウィジェット。
AbstractCpuのメタデータを利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.ui.fonts import get_monospace_font_family

GROUP_STYLE = """
    QGroupBox {
        font-weight: bold;
        border: 1px solid #222;
        border-radius: 4px;
        margin-top: 20px;
        color: #EEE;
        background-color: #121212;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 5px;
        left: 10px;
        color: #00AAAA;
    }
"""

# @intent:responsibility CPUのレジスタ値とフラグ状態を表示する汎用UIウィジェットを提供します。
class RegisterView(QWidget):
    """
    get_register_layout() のグループごとにフォームを作り、
    get_register_map() / get_flag_state() の値で表示を更新します。
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = get_monospace_font_family()
        self._register_labels: Dict[str, QLabel] = {}
        self._register_widths: Dict[str, int] = {}
        self._flag_labels: Dict[str, QLabel] = {}
        self._cpu: Optional[AbstractCpu] = None

    # @intent:responsibility 表示対象のCPUを設定し、UIレイアウトを構築します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._setup_ui()
        self.update_registers()

    def _setup_ui(self):
        while self.layout.count():
            item = self.layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._register_labels.clear()
        self._register_widths.clear()
        self._flag_labels.clear()

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet(GROUP_STYLE)
            group_layout = self._create_form(group_box)

            for reg in group.registers:
                hex_width = (reg.width + 3) // 4 # 16bit -> 4chars, 8bit -> 2chars
                self._register_widths[reg.name] = hex_width
                self._register_labels[reg.name] = self._add_row(group_layout, reg.name, f"0x{'0' * hex_width}")

            self.layout.addWidget(group_box)

        flags_box = QGroupBox("Flags")
        flags_box.setStyleSheet(GROUP_STYLE)
        flags_layout = self._create_form(flags_box)
        for name in self._cpu.get_flag_state():
            self._flag_labels[name] = self._add_row(flags_layout, name, "0")
        self.layout.addWidget(flags_box)

        self.layout.addStretch()

    def _create_form(self, group_box: QGroupBox) -> QFormLayout:
        form = QFormLayout(group_box)
        form.setLabelAlignment(Qt.AlignLeft)
        form.setContentsMargins(10, 15, 10, 10)
        form.setSpacing(5)
        return form

    def _add_row(self, form: QFormLayout, name: str, initial: str) -> QLabel:
        label_name = QLabel(f"{name}:")
        label_name.setStyleSheet("font-weight: bold; color: #BBBBBB;")
        label_value = QLabel(initial)
        label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
        label_value.setAlignment(Qt.AlignRight)
        form.addRow(label_name, label_value)
        return label_value

    # @intent:responsibility 現在のCPU状態を取得し、レジスタとフラグの表示値を更新します。
    def update_registers(self):
        if not self._cpu:
            return

        for name, value in self._cpu.get_register_map().items():
            if name in self._register_labels:
                width = self._register_widths[name]
                self._register_labels[name].setText(f"0x{value:0{width}X}")

        for name, value in self._cpu.get_flag_state().items():
            if name in self._flag_labels:
                self._flag_labels[name].setText("1" if value else "0")

    def register_text(self, name: str) -> str:
        return self._register_labels[name].text()

    def flag_text(self, name: str) -> str:
        return self._flag_labels[name].text()
