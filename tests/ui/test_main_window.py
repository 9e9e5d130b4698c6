# tests/ui/test_main_window.py
"""
MainWindowのバックエンド連携（プログラムロード、フレーム処理、フォールト通知、キー入力）を検証するテスト。
"""
import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import Qt, QEvent
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import QApplication, QMessageBox

from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import MachineConfig
from chip8_tracer.ui import app
from chip8_tracer.ui.main_window import MainWindow, resolve_keymap


@pytest.fixture
def window(qapp, monkeypatch):
    # テスト中にダイアログでブロックしないようにする
    calls = []
    monkeypatch.setattr(QMessageBox, "critical", lambda *args: calls.append(args))
    win = MainWindow(MachineConfig(cycles_per_frame=10))
    win.critical_calls = calls
    yield win
    win.frame_timer.stop()
    win.close()


def write_program(tmp_path, program: str, name: str = "prog.ch8") -> str:
    path = tmp_path / name
    path.write_bytes(bytes.fromhex(program))
    return str(path)


class TestMainWindow:
    def test_load_binary(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "6005 00E0"))
        assert window.code_view.disassembled_data[0] == (0x200, "6005", "LD V0, $05")
        assert window.status_label.text() == "Loaded prog.ch8"

    # @intent:test_case_hex 拡張子 .hex のファイルはIntel HEXとしてロードされることを検証します。
    def test_load_intel_hex(self, window, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text(":0202000000E01C\n:00000001FF\n")
        window.load_program(str(path))
        assert window.code_view.disassembled_data[0] == (0x200, "00E0", "CLS")

    def test_load_missing_file(self, window, tmp_path):
        with pytest.raises(OSError):
            window.load_program(str(tmp_path / "missing.ch8"))

    # @intent:test_case_frame 描画フラグが立ったフレームで表示を更新し、フラグをクリアすることを検証します。
    def test_frame_draws(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "A000 D005 1204"))
        window._on_frame()
        assert not window.cpu.draw
        # グリフ"0"の1行目は 0xF0
        assert window.display_view.image().pixelColor(0, 0).name() == "#33ff66"

    def test_frame_tone(self, window, tmp_path, monkeypatch):
        beeps = []
        monkeypatch.setattr(QApplication, "beep", lambda: beeps.append(True))
        window.load_program(write_program(tmp_path, "6001 F018 1204"))
        window._on_frame()
        assert beeps == [True]

    def test_frame_halt(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "6001 FFFF"))
        window.start()
        assert window.is_running
        window._on_frame()
        assert not window.is_running
        assert window.status_label.text() == "Halted"

    # @intent:test_case_fault フォールト発生時にタイマを止め、ダイアログで通知することを検証します。
    def test_frame_fault(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "6001 5011"))
        window.start()
        window._on_frame()
        assert not window.is_running
        assert window.cpu.faulted
        assert window.status_label.text().startswith("Fault:")
        assert len(window.critical_calls) == 1

    def test_start_after_halt_is_refused(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "FFFF"))
        window.step()
        window.start()
        assert not window.is_running

    def test_step_and_reset(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "6005 7001"))
        window.step()
        window.step()
        assert window.cpu.get_state().v[0] == 6
        assert window.register_view.register_text("V0") == "0x06"
        window.reset()
        assert window.cpu.get_state().pc == 0x200
        assert window.debugger.get_history() == []

    def test_key_events(self, window):
        press = QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_X, Qt.KeyboardModifier.NoModifier)
        window.keyPressEvent(press)
        assert window.cpu.is_key_held(0x0)

        release = QKeyEvent(QEvent.Type.KeyRelease, Qt.Key.Key_X, Qt.KeyboardModifier.NoModifier)
        window.keyReleaseEvent(release)
        assert not window.cpu.is_key_held(0x0)

    def test_apply_config_reloads_program(self, window, tmp_path):
        window.load_program(write_program(tmp_path, "6005"))
        window.apply_config(MachineConfig(cycles_per_frame=3, frame_rate=30))
        assert window.scheduler.cycles_per_frame == 3
        assert window.frame_timer.interval() == 33
        assert window.code_view.disassembled_data[0][2] == "LD V0, $05"


def test_resolve_keymap(capsys):
    resolved = resolve_keymap({"X": 0x0, "1": 0x1, "NOPE": 0x2})
    assert resolved[Qt.Key.Key_X.value] == 0x0
    assert resolved[Qt.Key.Key_1.value] == 0x1
    assert len(resolved) == 2
    assert "Unknown host key 'NOPE'" in capsys.readouterr().out


# @intent:test_case_keymap_names 複数語のキー名も大文字小文字を区別せずに解決できることを検証します。
def test_resolve_keymap_multi_word_names():
    resolved = resolve_keymap({"PAGEUP": 0x1, "BACKSPACE": 0x2, "capslock": 0x3, "Space": 0x4})
    assert resolved == {
        Qt.Key.Key_PageUp.value: 0x1,
        Qt.Key.Key_Backspace.value: 0x2,
        Qt.Key.Key_CapsLock.value: 0x3,
        Qt.Key.Key_Space.value: 0x4,
    }


def test_keymap_from_config_resolves(tmp_path):
    path = tmp_path / "machine.yaml"
    path.write_text('keymap:\n  "PageDown": 0x5\n')
    config = ConfigLoader().load_from_file(str(path))
    keymap = resolve_keymap(SystemBuilder().build_keymap(config))
    assert keymap[Qt.Key.Key_PageDown.value] == 0x5


def test_arg_parser():
    args = app.build_arg_parser().parse_args(["game.ch8", "--scale", "3", "--run"])
    assert args.program == "game.ch8"
    assert args.scale == 3
    assert args.run
    assert args.config is None
