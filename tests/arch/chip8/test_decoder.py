# tests/arch/chip8/test_decoder.py
"""
CHIP-8デコーダ（decode_opcode）の単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.instructions import decode_opcode, OpKind
from chip8_tracer.arch.chip8.instructions.maps import DECODE_MAP, EXECUTE_MAP

# @intent:test_suite デコードの全域性、純粋性、およびフィールド抽出の検証。

class TestDecodeTotality:
    # @intent:test_case_total 全ての16bitワードが例外なくデコードされ、同じ結果を返すことを検証します。
    def test_all_words_decode_deterministically(self):
        for word in range(0x10000):
            first = decode_opcode(word)
            second = decode_opcode(word)
            assert first == second
            assert first.word == word
            assert first.opcode_hex == f"{word:04X}"

    # @intent:test_case_tables 16の操作クラス全てにデコーダがあり、INVALID以外の全種別に実行関数があることを検証します。
    def test_tables_cover_all_classes_and_kinds(self):
        assert sorted(DECODE_MAP) == list(range(16))
        assert set(EXECUTE_MAP) == set(OpKind) - {OpKind.INVALID}


class TestDecodeFields:
    # @intent:test_case_kind 各命令ワードが正しい種別にデコードされることを検証します。
    @pytest.mark.parametrize("word, kind", [
        (0x00E0, OpKind.CLS),
        (0x00EE, OpKind.RET),
        (0x0123, OpKind.SYS),
        (0x01E0, OpKind.SYS),
        (0x1ABC, OpKind.JP),
        (0x2ABC, OpKind.CALL),
        (0x3A12, OpKind.SE_IMM),
        (0x4A12, OpKind.SNE_IMM),
        (0x5AB0, OpKind.SE_REG),
        (0x6A12, OpKind.LD_IMM),
        (0x7A12, OpKind.ADD_IMM),
        (0x8AB0, OpKind.MOV),
        (0x8AB1, OpKind.OR),
        (0x8AB2, OpKind.AND),
        (0x8AB3, OpKind.XOR),
        (0x8AB4, OpKind.ADD),
        (0x8AB5, OpKind.SUB),
        (0x8AB6, OpKind.SHR),
        (0x8AB7, OpKind.SUBN),
        (0x8ABE, OpKind.SHL),
        (0x9AB0, OpKind.SNE_REG),
        (0xA123, OpKind.LD_I),
        (0xB123, OpKind.JP_V0),
        (0xCA0F, OpKind.RND),
        (0xDAB5, OpKind.DRW),
        (0xEA9E, OpKind.SKP),
        (0xEAA1, OpKind.SKNP),
        (0xFA07, OpKind.LD_VX_DT),
        (0xFA0A, OpKind.LD_VX_K),
        (0xFA15, OpKind.LD_DT),
        (0xFA18, OpKind.LD_ST),
        (0xFA1E, OpKind.ADD_I),
        (0xFA29, OpKind.LD_F),
        (0xFA33, OpKind.LD_B),
        (0xFA55, OpKind.LD_MEM_REGS),
        (0xFA65, OpKind.LD_REGS_MEM),
        (0xFAFF, OpKind.HALT),
    ])
    def test_kind(self, word, kind):
        assert decode_opcode(word).kind == kind

    # @intent:test_case_invalid 未定義のサブセレクタはINVALIDとしてデコードされることを検証します。
    @pytest.mark.parametrize("word", [0x5AB1, 0x8AB8, 0x8ABF, 0x9AB1, 0xEA00, 0xFA00, 0xFAFE])
    def test_invalid(self, word):
        op = decode_opcode(word)
        assert op.kind == OpKind.INVALID
        assert op.text() == f"??? ${word:04X}"

    # @intent:test_case_fields 命令ワードから各フィールドが切り出されることを検証します。
    def test_fields(self):
        op = decode_opcode(0xD12F)
        assert (op.x, op.y, op.n, op.nn, op.nnn) == (0x1, 0x2, 0xF, 0x2F, 0x12F)
        assert op.length == 2

    # @intent:test_case_text 逆アセンブル表示用のテキストを検証します。
    def test_text(self):
        assert decode_opcode(0x6005).text() == "LD V0, $05"
        assert decode_opcode(0x8014).text() == "ADD V0, V1"
        assert decode_opcode(0xA300).text() == "LD I, $300"
        assert decode_opcode(0xD015).text() == "DRW V0, V1, 5"
        assert decode_opcode(0xF333).text() == "LD B, V3"
        assert decode_opcode(0x00E0).text() == "CLS"
