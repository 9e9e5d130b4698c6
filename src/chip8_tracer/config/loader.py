import yaml
from typing import Dict, Any, List
from .models import MachineConfig, DisplayConfig, KeymapEntry, DEFAULT_KEYMAP

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Machine config must be a mapping, got {type(data).__name__}")

        cycles_per_frame = self._parse_positive(data.get("cycles_per_frame", 10), "cycles_per_frame")
        frame_rate = self._parse_positive(data.get("frame_rate", 60), "frame_rate")

        seed = data.get("seed")
        if seed is not None:
            seed = self._parse_int(seed)

        # Parse Display
        display_data = data.get("display", {}) or {}
        defaults = DisplayConfig()
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", defaults.scale), "display.scale"),
            foreground=str(display_data.get("foreground", defaults.foreground)),
            background=str(display_data.get("background", defaults.background)),
        )

        # Parse Keymap (省略時はCOSMAC配列)
        keymap_data = data.get("keymap")
        if keymap_data is None:
            keymap_data = DEFAULT_KEYMAP
        keymap = self._parse_keymap(keymap_data)

        return MachineConfig(
            cycles_per_frame=cycles_per_frame,
            frame_rate=frame_rate,
            seed=seed,
            program=data.get("program"),
            display=display,
            keymap=keymap,
        )

    def _parse_keymap(self, keymap_data: Any) -> List[KeymapEntry]:
        if not isinstance(keymap_data, dict):
            raise ValueError(f"keymap must be a mapping of host key to CHIP-8 key, got {keymap_data!r}")
        keymap = []
        for host_key, value in keymap_data.items():
            key = self._parse_int(value)
            if not 0 <= key <= 0xF:
                raise ValueError(f"keymap entry '{host_key}' maps to {key}, expected 0x0-0xF")
            # YAMLでは 1: のようなキーが整数になるため文字列へ正規化する
            keymap.append(KeymapEntry(host_key=str(host_key).upper(), key=key))
        return keymap

    def _parse_positive(self, value: Any, name: str) -> int:
        result = self._parse_int(value)
        if result <= 0:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
        return result

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
