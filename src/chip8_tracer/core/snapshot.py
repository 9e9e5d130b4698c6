# src/chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッガの実行履歴に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import BusAccessType, BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    アーキテクチャ固有のフィールドはサブクラスで追加します。
    """
    opcode_hex: str # 例: "00E0"
    mnemonic: str # 例: "CLS"
    operands: Tuple[str, ...] = () # 例: ("V0", "$05")
    cycle_count: int = 1 # この命令が消費するサイクル数
    length: int = 2 # 命令のバイト長

    # @intent:responsibility 逆アセンブル表示用の文字列（"LD V0, $05"など）を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "main_loop: JP $200"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    stateは生成時点のコピーであり、以降のstep()で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:responsibility 指定された種別のバスアクセスのみを抽出します。
    def accesses(self, access_type: BusAccessType) -> List[BusAccess]:
        return [a for a in self.bus_activity if a.access_type == access_type]
