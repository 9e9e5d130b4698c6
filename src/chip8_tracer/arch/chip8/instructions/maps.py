"""
命令ワードと命令実装のマッピング定義。

デコードは操作クラス（上位4bit）をキーとするジャンプテーブルで行い、
クラス0, 8, E, F はさらにサブセレクタをキーとするテーブルを引きます。
"""
from . import alu
from . import control
from . import display
from . import load
from .base import OpKind, Chip8Operation, make_operation

# @intent:map クラス0: ワード全体で判定し、それ以外はSYS。
CLASS_0_MAP = {
    0x00E0: OpKind.CLS,
    0x00EE: OpKind.RET,
}

# @intent:map クラス8: 下位4bit（サブセレクタ）によるレジスタ間ALU命令。
CLASS_8_MAP = {
    0x0: OpKind.MOV,
    0x1: OpKind.OR,
    0x2: OpKind.AND,
    0x3: OpKind.XOR,
    0x4: OpKind.ADD,
    0x5: OpKind.SUB,
    0x6: OpKind.SHR,
    0x7: OpKind.SUBN,
    0xE: OpKind.SHL,
}

# @intent:map クラスE: 下位8bitによるキー判定命令。
CLASS_E_MAP = {
    0x9E: OpKind.SKP,
    0xA1: OpKind.SKNP,
}

# @intent:map クラスF: 下位8bitによるタイマ/メモリ/制御命令。
CLASS_F_MAP = {
    0x07: OpKind.LD_VX_DT,
    0x0A: OpKind.LD_VX_K,
    0x15: OpKind.LD_DT,
    0x18: OpKind.LD_ST,
    0x1E: OpKind.ADD_I,
    0x29: OpKind.LD_F,
    0x33: OpKind.LD_B,
    0x55: OpKind.LD_MEM_REGS,
    0x65: OpKind.LD_REGS_MEM,
    0xFF: OpKind.HALT,
}

def _decode_class_0(word: int) -> Chip8Operation:
    return make_operation(CLASS_0_MAP.get(word, OpKind.SYS), word)

def _decode_class_8(word: int) -> Chip8Operation:
    return make_operation(CLASS_8_MAP.get(word & 0xF, OpKind.INVALID), word)

def _decode_class_e(word: int) -> Chip8Operation:
    return make_operation(CLASS_E_MAP.get(word & 0xFF, OpKind.INVALID), word)

def _decode_class_f(word: int) -> Chip8Operation:
    return make_operation(CLASS_F_MAP.get(word & 0xFF, OpKind.INVALID), word)

# @intent:utility_function サブセレクタが0である場合のみ有効なクラス（5xy0, 9xy0）用のデコーダを生成します。
def _sub_zero(kind: OpKind):
    def decode(word: int) -> Chip8Operation:
        return make_operation(kind if word & 0xF == 0 else OpKind.INVALID, word)
    return decode

def _fixed(kind: OpKind):
    def decode(word: int) -> Chip8Operation:
        return make_operation(kind, word)
    return decode

# @intent:map 操作クラス（上位4bit）からデコード関数へのマッピングテーブル。16クラス全てを網羅します。
DECODE_MAP = {
    0x0: _decode_class_0,
    0x1: _fixed(OpKind.JP),
    0x2: _fixed(OpKind.CALL),
    0x3: _fixed(OpKind.SE_IMM),
    0x4: _fixed(OpKind.SNE_IMM),
    0x5: _sub_zero(OpKind.SE_REG),
    0x6: _fixed(OpKind.LD_IMM),
    0x7: _fixed(OpKind.ADD_IMM),
    0x8: _decode_class_8,
    0x9: _sub_zero(OpKind.SNE_REG),
    0xA: _fixed(OpKind.LD_I),
    0xB: _fixed(OpKind.JP_V0),
    0xC: _fixed(OpKind.RND),
    0xD: _fixed(OpKind.DRW),
    0xE: _decode_class_e,
    0xF: _decode_class_f,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。INVALIDは意図的に含めません。
EXECUTE_MAP = {
    # Control
    OpKind.SYS: control.execute_sys,
    OpKind.RET: control.execute_ret,
    OpKind.JP: control.execute_jp,
    OpKind.CALL: control.execute_call,
    OpKind.SE_IMM: control.execute_se_imm,
    OpKind.SNE_IMM: control.execute_sne_imm,
    OpKind.SE_REG: control.execute_se_reg,
    OpKind.SNE_REG: control.execute_sne_reg,
    OpKind.JP_V0: control.execute_jp_v0,
    OpKind.SKP: control.execute_skp,
    OpKind.SKNP: control.execute_sknp,
    OpKind.LD_VX_K: control.execute_ld_vx_k,
    OpKind.HALT: control.execute_halt,

    # ALU
    OpKind.ADD_IMM: alu.execute_add_imm,
    OpKind.MOV: alu.execute_mov,
    OpKind.OR: alu.execute_or,
    OpKind.AND: alu.execute_and,
    OpKind.XOR: alu.execute_xor,
    OpKind.ADD: alu.execute_add,
    OpKind.SUB: alu.execute_sub,
    OpKind.SHR: alu.execute_shr,
    OpKind.SUBN: alu.execute_subn,
    OpKind.SHL: alu.execute_shl,
    OpKind.RND: alu.execute_rnd,

    # Load/Store
    OpKind.LD_IMM: load.execute_ld_imm,
    OpKind.LD_I: load.execute_ld_i,
    OpKind.LD_VX_DT: load.execute_ld_vx_dt,
    OpKind.LD_DT: load.execute_ld_dt,
    OpKind.LD_ST: load.execute_ld_st,
    OpKind.ADD_I: load.execute_add_i,
    OpKind.LD_F: load.execute_ld_f,
    OpKind.LD_B: load.execute_ld_b,
    OpKind.LD_MEM_REGS: load.execute_ld_mem_regs,
    OpKind.LD_REGS_MEM: load.execute_ld_regs_mem,

    # Display
    OpKind.CLS: display.execute_cls,
    OpKind.DRW: display.execute_drw,
}
