# src/chip8_tracer/core/errors.py
"""
Core Layer (実行時フォールト)

step()/load() がホストへ報告する型付きの例外を定義します。
いずれも致命的であり、コア内部での再試行や部分的な復旧は行いません。
"""
from typing import Optional


# @intent:responsibility step()から報告される全ての実行時フォールトの基底クラス。
class ExecutionFault(Exception):
    """
    命令実行中に発生した致命的な状態を表します。
    フォールトしたマシンはホストによって破棄またはリセットされることを想定しています。
    """
    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.address = address


# @intent:responsibility アドレス空間外へのアクセスを表します。
# @intent:rationale IndexErrorも継承し、従来のバス利用側のexcept節とも互換を保ちます。
class MemoryFault(ExecutionFault, IndexError):
    pass


# @intent:responsibility コールスタックのオーバーフロー/アンダーフローを表します。
class StackFault(MemoryFault):
    pass


# @intent:responsibility デコードできない命令ワードを表します。
class IllegalInstruction(ExecutionFault):
    """
    不正な命令ワードと、そのワードをフェッチしたアドレスを保持します。
    """
    def __init__(self, word: int, address: int):
        super().__init__(f"Illegal instruction {word:04X} at {address:#05x}", address)
        self.word = word


# @intent:responsibility プログラムイメージがプログラム領域に収まらないことを表します。
# @intent:post-condition この例外が送出された時点で、マシンの状態は一切変更されていません。
class LoadFault(ValueError):
    def __init__(self, message: str, size: int = 0, limit: int = 0):
        super().__init__(message)
        self.size = size
        self.limit = limit
