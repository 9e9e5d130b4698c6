"""
表示命令（CLS, DRW）の実装。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, Chip8Devices, check_range

def execute_cls(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    devices.framebuffer.clear()

# @intent:responsibility DRW Vx, Vy, n。I から n 行のスプライトをXORで描画し、衝突をVFへ報告します。
# @intent:rationale 描画原点は画面サイズで折り返し、右端・下端をはみ出したピクセルはクリップします。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Chip8Operation, devices: Chip8Devices) -> None:
    fb = devices.framebuffer
    check_range(bus, state.i, op.n)

    state.vf = 0
    origin_x = state.v[op.x] % fb.width
    origin_y = state.v[op.y] % fb.height

    for row in range(op.n):
        sprite_byte = bus.read(state.i + row)
        py = origin_y + row
        if py >= fb.height:
            break
        for bit in range(8):
            if not sprite_byte & (0x80 >> bit):
                continue
            px = origin_x + bit
            if px >= fb.width:
                break
            if fb.xor_pixel(px, py):
                state.vf = 1

    fb.dirty = True
