"""
算術論理演算命令の実装。

フラグを定義する命令では、結果を書き込んだ後にVFを書き込みます（x == F の場合はフラグが残ります）。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, Chip8Devices

# @intent:responsibility ADD Vx, nn。8bitでラップし、フラグは更新しません。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] = (state.v[op.x] + op.nn) & 0xFF

# --- 8xy0-8xy3 ---
def execute_mov(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] = state.v[op.y]

def execute_or(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] |= state.v[op.y]

def execute_and(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] &= state.v[op.y]

def execute_xor(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] ^= state.v[op.y]

# --- 8xy4 ---
# @intent:responsibility ADD Vx, Vy。桁あふれ（> 0xFF）でVF=1。
def execute_add(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- 8xy5 / 8xy7 ---
# @intent:responsibility SUB Vx, Vy。Vx - Vy。ボローなし（Vx >= Vy）でVF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 >= v2 else 0

# @intent:responsibility SUBN Vx, Vy。Vy - Vx をVxへ。ボローの扱いはSUBと同じ。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 >= v1 else 0

# --- 8xy6 / 8xyE ---
# @intent:responsibility SHR Vx。シフトアウトされたbit0をVFへ。Vyは参照しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    val = state.v[op.x]
    state.v[op.x] = val >> 1
    state.vf = val & 0x01

# @intent:responsibility SHL Vx。シフトアウトされたbit7をVFへ。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    val = state.v[op.x]
    state.v[op.x] = (val << 1) & 0xFF
    state.vf = (val & 0x80) >> 7

# --- Cxnn ---
# @intent:responsibility RND Vx, nn。マシン固有の乱数生成器から得たバイトとnnのAND。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.v[op.x] = devices.rng.randrange(256) & op.nn
