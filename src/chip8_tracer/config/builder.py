from typing import Dict, Tuple
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.cpu import Chip8Cpu, create_bus
from .models import MachineConfig

# @intent:responsibility マシン構成（Config）に基づいて、Bus、Device、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: MachineConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = create_bus()
        cpu = Chip8Cpu(bus, seed=config.seed)
        return cpu, bus

    # @intent:responsibility ホストのキー名からCHIP-8キー番号への対応表を構築します。
    # @intent:rationale 同じホストキーが重複した場合は後勝ちとし、警告を出します。
    def build_keymap(self, config: MachineConfig) -> Dict[str, int]:
        keymap: Dict[str, int] = {}
        for entry in config.keymap:
            if entry.host_key in keymap:
                print(f"Warning: Host key '{entry.host_key}' mapped more than once, using {entry.key:X}")
            keymap[entry.host_key] = entry.key

        missing = sorted(set(range(16)) - set(keymap.values()))
        if missing:
            print(f"Warning: CHIP-8 keys {', '.join(f'{k:X}' for k in missing)} have no host key binding")
        return keymap
