# tests/ui/test_register_view.py
"""
RegisterViewがCPUのレイアウト情報から表示を構築し、値を更新することを検証するテスト。
"""
import pytest

pytest.importorskip("PySide6")

from chip8_tracer.arch.chip8 import Chip8Cpu
from chip8_tracer.ui.register_view import RegisterView


class TestRegisterView:
    def test_initial_values(self, qapp):
        view = RegisterView()
        view.set_cpu(Chip8Cpu())
        assert view.register_text("V0") == "0x00"
        assert view.register_text("PC") == "0x0200"
        assert view.register_text("DT") == "0x00"
        assert view.flag_text("HALT") == "0"

    # @intent:test_case_update 命令実行後にupdate_registersで表示が追従することを検証します。
    def test_update_after_step(self, qapp):
        cpu = Chip8Cpu()
        cpu.load(bytes.fromhex("6A2F A123 6F01"))
        view = RegisterView()
        view.set_cpu(cpu)

        for _ in range(3):
            cpu.step()
        view.update_registers()

        assert view.register_text("VA") == "0x2F"
        assert view.register_text("I") == "0x0123"
        assert view.register_text("PC") == "0x0206"
        assert view.flag_text("VF") == "1"
