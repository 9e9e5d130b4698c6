# chip8_tracer/host/scheduler.py
"""
ホスト側のフレームスケジューラ。

1フレームごとに固定数の命令を実行し、その後タイマを1回だけ減算します。
frame_rate を 60 にすれば、タイマは実機と同じ 60Hz で進みます。
"""
from dataclasses import dataclass

from chip8_tracer.arch.chip8.cpu import Chip8Cpu


# @intent:data_structure 1フレーム分の実行結果。
@dataclass(frozen=True)
class FrameResult:
    steps: int      # 実行に成功した命令数
    draw: bool      # フレームバッファの再描画が必要か
    tone: bool      # このフレームでブザーを鳴らすべきか
    halted: bool    # HALTによりマシンが停止したか


# @intent:responsibility CPUの step() と dec_timers() をフレーム単位で駆動します。
class FrameScheduler:
    def __init__(self, cpu: Chip8Cpu, cycles_per_frame: int = 10):
        if cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be a positive integer.")
        self._cpu = cpu
        self.cycles_per_frame = cycles_per_frame

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    # @intent:post-condition ExecutionFaultは伝播し、その場合タイマは減算されません。
    def run_frame(self) -> FrameResult:
        cpu = self._cpu
        steps = 0
        while steps < self.cycles_per_frame and cpu.running:
            cpu.step()
            steps += 1

        tone = cpu.dec_timers()
        return FrameResult(
            steps=steps,
            draw=cpu.draw,
            tone=tone,
            halted=cpu.get_state().halted,
        )
