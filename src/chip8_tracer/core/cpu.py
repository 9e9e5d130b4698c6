# src/chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import copy
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.errors import ExecutionFault, MemoryFault
from chip8_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_tracer.core.state import CpuState
from chip8_tracer.common.types import SymbolMap, RegisterLayoutInfo

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        self._faulted: bool = False
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility シンボルマップ（名前とアドレスの対応表）を設定します。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        self._symbol_map = symbol_map
        # 逆引きマップを作成して、アドレスからラベルを素早く引けるようにする
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        """
        CPUのレジスタ、PC、SPを初期値に戻し、サイクルカウンタとフォールト状態をクリアします。
        """
        self._state = self._create_initial_state()
        self._cycle_count = 0
        self._faulted = False

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）を返します。
        """
        return self._state

    # @intent:responsibility 外部から与えられた状態でCPUの状態を置き換えます。
    def restore_state(self, state: CpuState) -> None:
        self._state = copy.deepcopy(state)

    @property
    def cycles(self) -> int:
        """これまでに実行に成功した命令の累計サイクル数（単調増加）。"""
        return self._cycle_count

    @property
    def running(self) -> bool:
        """HALTまたは致命的フォールトの後はFalseになります。"""
        return not (self._state.halted or self._faulted)

    @property
    def faulted(self) -> bool:
        return self._faulted

    # @intent:responsibility メモリから次の命令（オペコード）をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからメモリの次の命令をフェッチし、その値を返します。
        PCはここでは更新しません（_update_pcの責務）。
        """
        pass

    # @intent:responsibility フェッチしたオペコードを解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    # @intent:pre-condition _update_pcにより、state.pcは既に次の命令を指しています。
    @abstractmethod
    def _execute(self, operation: Operation, initial_pc: int) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    #                  アーキテクチャ固有の振る舞い（HALT処理など）はフックメソッドで対応します。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。

        ExecutionFaultが発生した場合、PCは命令の先頭に戻され、CPUはフォールト状態となり
        （running == False）、例外はそのまま呼び出し元へ伝播します。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. HALT判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        try:
            # 3. フェッチ
            opcode = self._fetch()
            # 4. デコード
            operation = self._decode(opcode)
            # 5. PC更新 (Hook)
            self._update_pc(operation)
            # 6. 実行
            self._execute(operation, initial_pc)
            # HALT後のPCは二度とフェッチされないため検証しない
            if not self._state.halted:
                self._validate_pc(self._state.pc)
        except ExecutionFault:
            self._state.pc = initial_pc
            self._faulted = True
            self._bus.get_and_clear_activity_log()
            raise

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility HALT状態の場合の処理を行います。
    # @intent:return HALT中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    # @intent:responsibility 命令実行前にPCを更新します。デフォルトは命令長分進める。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = self._state.pc + operation.length

    # @intent:responsibility 実行後のPCが次の命令をフェッチ可能な位置を指しているか検証します。
    def _validate_pc(self, pc: int) -> None:
        if not (self._bus.is_mapped(pc) and self._bus.is_mapped(pc + 1)):
            raise MemoryFault(f"Program counter {pc:#06x} is outside of memory.", pc)

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += operation.text()

        return Snapshot(
            # stateは可変なので、Snapshotの不変性を保つためにコピーを保持する
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=symbol_info),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        UIがCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをUI上でどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
