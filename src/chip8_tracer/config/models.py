from dataclasses import dataclass, field
from typing import Dict, List, Optional

# COSMAC VIP の 4x4 キーパッド配列をホストキーボードの 1234/QWER/ASDF/ZXCV に割り当てる
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class KeymapEntry:
    host_key: str  # Qtのキー名 ("1", "Q", "Space" など)
    key: int       # CHIP-8 キー番号 0x0-0xF

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class MachineConfig:
    cycles_per_frame: int = 10
    frame_rate: int = 60
    seed: Optional[int] = None
    program: Optional[str] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: List[KeymapEntry] = field(
        default_factory=lambda: [KeymapEntry(k, v) for k, v in DEFAULT_KEYMAP.items()]
    )
