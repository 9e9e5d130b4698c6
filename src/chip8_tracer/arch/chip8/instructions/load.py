"""
転送命令（レジスタ、インデックス、タイマ、メモリ）の実装。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.constants import GLYPH_OFFSET, GLYPH_HEIGHT
from .base import Chip8Operation, Chip8Devices, check_range

# --- 6xnn / Annn ---
def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] = op.nn

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.i = op.nnn

# --- タイマ ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] = state.delay_timer

def execute_ld_dt(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.delay_timer = state.v[op.x]

def execute_ld_st(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.sound_timer = state.v[op.x]

# --- インデックスレジスタ ---
# @intent:responsibility ADD I, Vx。Iは16bitでラップします。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# @intent:responsibility LD F, Vx。Vxの下位4bitに対応するグリフ（5バイト）のアドレスをIへ設定します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.i = GLYPH_OFFSET + (state.v[op.x] & 0xF) * GLYPH_HEIGHT

# --- メモリ ---
# @intent:responsibility LD B, Vx。Vxの10進表現（百、十、一の位）をI, I+1, I+2へ書き込みます。
def execute_ld_b(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    val = state.v[op.x]
    check_range(bus, state.i, 3)
    bus.write(state.i, val // 100)
    bus.write(state.i + 1, (val % 100) // 10)
    bus.write(state.i + 2, val % 10)

# @intent:responsibility LD [I], Vx。V0..Vxを I から順に書き込み、Iを x+1 進めます。
def execute_ld_mem_regs(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    check_range(bus, state.i, op.x + 1)
    for offset in range(op.x + 1):
        bus.write(state.i + offset, state.v[offset])
    state.i = (state.i + op.x + 1) & 0xFFFF

# @intent:responsibility LD Vx, [I]。I から V0..Vx へ読み込み、Iを x+1 進めます。
def execute_ld_regs_mem(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    check_range(bus, state.i, op.x + 1)
    for offset in range(op.x + 1):
        state.v[offset] = bus.read(state.i + offset)
    state.i = (state.i + op.x + 1) & 0xFFFF
