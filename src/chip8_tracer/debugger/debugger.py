# chip8_tracer/debugger/debugger.py
"""
デバッガモジュール。

インタプリタコアの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
"""
import copy
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import BusAccessType

# レジスタ表示名からCpuStateの属性名への対応
_REGISTER_ATTRIBUTES = {
    "I": "i",
    "PC": "pc",
    "SP": "sp",
    "DT": "delay_timer",
    "ST": "sound_timer",
}

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_name は "V0".."VF", "I", "PC", "SP", "DT", "ST" のいずれかです。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True


# @intent:utility_function レジスタ表示名から状態の値を取り出します。未知の名前はNone。
def read_register(state: CpuState, name: str) -> Optional[int]:
    name = name.upper()
    if len(name) == 2 and name[0] == "V" and hasattr(state, "v"):
        try:
            return state.v[int(name[1], 16)]
        except ValueError:
            return None
    attribute = _REGISTER_ATTRIBUTES.get(name, name.lower())
    return getattr(state, attribute, None)


# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    実行履歴は history_limit 件までのSnapshotを保持します。
    """
    def __init__(self, cpu: AbstractCpu, history_limit: int = 1000):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: CpuState = copy.deepcopy(self._cpu.get_state())
        self._last_snapshot: Optional[Snapshot] = None
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        """
        既存のブレークポイントを更新します（有効/無効の切り替えなど）。
        """
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
        self._last_snapshot = None

    @property
    def is_running(self) -> bool:
        return self._running

    def _is_pc_breakpoint(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    # @intent:responsibility Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                if any(a.address == bp.address for a in snapshot.accesses(BusAccessType.READ)):
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                if any(a.address == bp.address for a in snapshot.accesses(BusAccessType.WRITE)):
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name:
                    current = read_register(current_state, bp.register_name)
                    if current is not None and current == bp.value:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name:
                    current = read_register(current_state, bp.register_name)
                    previous = read_register(self._previous_state, bp.register_name)
                    if current is not None and current != previous:
                        return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        ExecutionFaultはそのまま呼び出し元へ伝播します。
        """
        self._previous_state = copy.deepcopy(self._cpu.get_state())
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility ブレークポイント、HALT、またはmax_stepsに達するまでCPUを実行します。
    # @intent:return 実際に実行した命令数。
    def run(self, max_steps: Optional[int] = None) -> int:
        """
        現在のPCにPC_MATCHブレークポイントがある場合は、まず1命令進めてから判定を始めます
        （同じブレークポイントで停止し続けないため）。
        """
        self._running = True
        steps = 0
        resuming = self._is_pc_breakpoint(self._cpu.get_state().pc)

        try:
            while self._running and self._cpu.running:
                if max_steps is not None and steps >= max_steps:
                    break

                current_pc = self._cpu.get_state().pc
                if not resuming and self._is_pc_breakpoint(current_pc):
                    print(f"Breakpoint hit at PC: {current_pc:#06x}")
                    break

                snapshot = self.step_instruction()
                steps += 1
                resuming = False

                if self._check_other_breakpoints(snapshot):
                    print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                    break
        finally:
            self._running = False

        return steps

    def stop(self) -> None:
        self._running = False
