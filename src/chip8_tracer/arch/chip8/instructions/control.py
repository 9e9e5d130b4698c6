"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー待ち、HALT）の実装。

実行時点でstate.pcは既に次の命令（pc+2）を指しています。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, Chip8Devices, check_pc_target, push_word, peek_return_address

# --- SYS ---
# @intent:responsibility SYS nnn（ネイティブコール）。互換性のために残された命令で、何もしません。
def execute_sys(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    # ネイティブコードは実行しない
    pass

# --- JP / CALL / RET ---
def execute_jp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.pc = op.nnn

# @intent:responsibility JP V0, nnn。V0 + nnn へジャンプします（範囲外はCPU側の検証でMemoryFault）。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.pc = state.v[0] + op.nnn

# @intent:responsibility CALL nnn。次の命令のアドレスをビッグエンディアンでプッシュし、nnnへジャンプします。
# @intent:pre-condition 分岐先を先に検証し、フォールト時にスタックが変化しないようにします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    check_pc_target(bus, op.nnn)
    push_word(state, bus, state.pc)
    state.pc = op.nnn

# @intent:responsibility RET。スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    return_addr = peek_return_address(state, bus)
    check_pc_target(bus, return_addr)
    state.sp -= 2
    state.pc = return_addr

# --- 条件スキップ ---
def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if state.v[op.x] == op.nn:
        state.pc += 2

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if state.v[op.x] != op.nn:
        state.pc += 2

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if state.v[op.x] == state.v[op.y]:
        state.pc += 2

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if state.v[op.x] != state.v[op.y]:
        state.pc += 2

# --- キー入力 ---
# @intent:responsibility SKP Vx。キーVxが押下中なら次の命令をスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if devices.keypad.is_held(state.v[op.x]):
        state.pc += 2

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    if not devices.keypad.is_held(state.v[op.x]):
        state.pc += 2

# @intent:responsibility LD Vx, K。キーが押下されるまでPCを進めず、同じ命令を再実行させます。
# @intent:rationale ホストをブロックせず、PCの自己遷移のみで待機を表現します。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    key = devices.keypad.first_held()
    if key is None:
        state.pc -= op.length
    else:
        state.v[op.x] = key

# --- HALT ---
# @intent:responsibility HALT (FxFF)。実行を正常に停止します。
def execute_halt(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    state.halted = True
