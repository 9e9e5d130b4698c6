# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
マシン（CPU）とフレームタイマを保持し、表示・入力・実行制御を仲介します。
"""
import enum
import os
from typing import Dict, Optional

from PySide6.QtWidgets import (
    QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox,
)
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_tracer.config.models import MachineConfig
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.core.errors import ExecutionFault
from chip8_tracer.debugger.debugger import Debugger
from chip8_tracer.host.scheduler import FrameScheduler
from chip8_tracer.loader.loader import BinaryLoader, IntelHexLoader
from .display_view import DisplayView
from .register_view import RegisterView
from .code_view import CodeView
from .fonts import get_monospace_font_family


def _key_code(key) -> int:
    return key.value if isinstance(key, enum.Enum) else int(key)


def _qt_key_names() -> Dict[str, int]:
    # "Key_PageUp" -> "PAGEUP"
    return {
        name[len("Key_"):].upper(): _key_code(member)
        for name, member in Qt.Key.__members__.items()
        if name.startswith("Key_")
    }


# @intent:utility_function 設定のホストキー名をQtのキーコードへ解決します。未知の名前は警告して無視します。
# @intent:rationale 設定ローダーはキー名を大文字化するため、Qt.Keyのメンバー名とは大文字小文字を区別せずに照合します。
def resolve_keymap(keymap: Dict[str, int]) -> Dict[int, int]:
    key_names = _qt_key_names()
    resolved: Dict[int, int] = {}
    for name, chip8_key in keymap.items():
        qt_key = key_names.get(name.upper())
        if qt_key is None:
            print(f"Warning: Unknown host key '{name}' in keymap, ignored")
            continue
        resolved[qt_key] = chip8_key
    return resolved


# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    # @intent:responsibility MainWindowを初期化し、UIコンポーネントとバックエンドを設定します。
    def __init__(self, config: Optional[MachineConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("CHIP-8 Tracer")
        self.setDockNestingEnabled(True)

        self.config = config if config is not None else MachineConfig()
        self.program_path: Optional[str] = None

        self.frame_timer = QTimer(self)
        self.frame_timer.timeout.connect(self._on_frame)

        self._set_dark_theme()
        self._create_views()
        self._create_toolbar()
        self._create_menus()
        self._setup_backend()

        self._update_ui_state(False)

    # @intent:responsibility 設定に基づいてCPU、スケジューラ、デバッガ、キーマップを生成します。
    def _setup_backend(self):
        builder = SystemBuilder()
        self.cpu, self.bus = builder.build_system(self.config)
        self.scheduler = FrameScheduler(self.cpu, self.config.cycles_per_frame)
        self.debugger = Debugger(self.cpu)
        self.keymap = resolve_keymap(builder.build_keymap(self.config))

        self.frame_timer.setInterval(max(1, round(1000 / self.config.frame_rate)))
        display = self.config.display
        self.display_view.set_scale(display.scale)
        self.display_view.set_colors(display.foreground, display.background)
        self.register_view.set_cpu(self.cpu)
        self.code_view.set_cpu(self.cpu)
        self._refresh_views()

    def _create_views(self):
        self.display_view = DisplayView()
        self.setCentralWidget(self.display_view)

        code_dock = QDockWidget("Disassembly", self)
        code_dock.setAllowedAreas(Qt.LeftDockWidgetArea)
        self.code_view = CodeView()
        code_dock.setWidget(self.code_view)
        self.addDockWidget(Qt.LeftDockWidgetArea, code_dock)

        register_dock = QDockWidget("Registers", self)
        register_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        register_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, register_dock)

        self.status_label = QLabel("No program loaded")
        self.statusBar().addWidget(self.status_label)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.setShortcut("F5")
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.setShortcut("Shift+F5")
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.setShortcut("F10")
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)
        toolbar.addAction(self.reset_action)

    # @intent:responsibility メニューバーを作成し、ファイル操作アクションを追加します。
    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._open_program_dialog)
        file_menu.addAction(self.load_rom_action)

        self.load_config_action = QAction("Load Machine Config...", self)
        self.load_config_action.triggered.connect(self._open_config_dialog)
        file_menu.addAction(self.load_config_action)

    # @intent:responsibility 実行状態に応じてUIコンポーネントの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        self.load_rom_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    @property
    def is_running(self) -> bool:
        return self.frame_timer.isActive()

    # @intent:responsibility プログラムファイルを読み込みます。拡張子 .hex はIntel HEXとして扱います。
    # @intent:post-condition 失敗時は例外を送出し、直前の状態は保持されます。
    def load_program(self, path: str) -> None:
        if os.path.splitext(path)[1].lower() == ".hex":
            IntelHexLoader().load_intel_hex(path, self.cpu)
        else:
            BinaryLoader().load_binary(path, self.cpu)
        self.program_path = path
        self.debugger.clear_history()
        self.code_view.reset_cache()
        self._refresh_views()
        self.status_label.setText(f"Loaded {os.path.basename(path)}")

    # @intent:responsibility マシン設定を適用し直します。ロード済みのプログラムは新しいマシンへ再ロードします。
    def apply_config(self, config: MachineConfig) -> None:
        self.stop()
        self.config = config
        self._setup_backend()
        if self.program_path:
            self.load_program(self.program_path)

    @Slot()
    def _open_program_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(
            self, "Open CHIP-8 Program", "", "CHIP-8 Programs (*.ch8 *.c8 *.hex);;All Files (*)"
        )
        if not file_name:
            return
        try:
            self.load_program(file_name)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load program: {e}")

    @Slot()
    def _open_config_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(
            self, "Open Machine Config", "", "YAML Files (*.yaml *.yml);;All Files (*)"
        )
        if not file_name:
            return
        try:
            self.apply_config(ConfigLoader().load_from_file(file_name))
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load machine config: {e}")

    # @intent:responsibility フレームタイマを開始し、連続実行に入ります。
    @Slot()
    def start(self):
        if not self.cpu.running:
            self.status_label.setText("Machine is stopped; reset to run again")
            return
        self._update_ui_state(True)
        self.status_label.setText("Running...")
        self.frame_timer.start()

    @Slot()
    def stop(self):
        if self.frame_timer.isActive():
            self.frame_timer.stop()
            self.status_label.setText("Stopped")
        self._update_ui_state(False)
        self._refresh_views()

    # @intent:responsibility デバッガ経由で1命令だけ実行します。タイマは進めません。
    @Slot()
    def step(self):
        if not self.cpu.running:
            return
        try:
            snapshot = self.debugger.step_instruction()
        except ExecutionFault as e:
            self._report_fault(e)
            return
        self.status_label.setText(snapshot.metadata.symbol_info or snapshot.operation.text())
        self._refresh_views()

    @Slot()
    def reset(self):
        self.stop()
        self.cpu.reset()
        self.debugger.clear_history()
        self._refresh_views()
        self.status_label.setText("Reset")

    # @intent:responsibility 1フレーム分の実行、描画、ブザーを処理します。
    @Slot()
    def _on_frame(self):
        try:
            result = self.scheduler.run_frame()
        except ExecutionFault as e:
            self._report_fault(e)
            return

        if result.draw:
            self.display_view.update_frame(self.cpu.framebuffer)
            self.cpu.clear_draw_flag()
        if result.tone:
            QApplication.beep()
        self.register_view.update_registers()

        if result.halted:
            self.stop()
            self.status_label.setText("Halted")

    # @intent:responsibility フォールト発生時に実行を止め、内容をユーザーへ通知します。
    def _report_fault(self, fault: ExecutionFault) -> None:
        self.frame_timer.stop()
        self._update_ui_state(False)
        self._refresh_views()
        self.status_label.setText(f"Fault: {fault}")
        QMessageBox.critical(self, "Execution Fault", str(fault))

    def _refresh_views(self):
        self.display_view.update_frame(self.cpu.framebuffer)
        self.cpu.clear_draw_flag()
        self.register_view.update_registers()
        self.code_view.update_code(self.cpu.get_state().pc)

    # @intent:responsibility ホストのキーイベントをキーマップ経由で入力ラッチへ伝えます。
    def keyPressEvent(self, event: QKeyEvent):
        key = self.keymap.get(_key_code(event.key()))
        if key is None:
            super().keyPressEvent(event)
            return
        if not event.isAutoRepeat():
            self.cpu.key_down(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = self.keymap.get(_key_code(event.key()))
        if key is None:
            super().keyReleaseEvent(event)
            return
        if not event.isAutoRepeat():
            self.cpu.key_up(key)

    # @intent:responsibility アプリケーションにダークテーマのスタイルシートを適用します。
    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

        font_family = get_monospace_font_family()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{font_family}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
        """)

    # @intent:responsibility ウィンドウ終了時にフレームタイマを停止します。
    def closeEvent(self, event: QCloseEvent):
        self.frame_timer.stop()
        event.accept()
