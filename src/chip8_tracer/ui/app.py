# src/chip8_tracer/ui/app.py
"""
Qtアプリケーションのエントリポイント (chip8-tracer)。
コマンドライン引数を解析し、メインウィンドウを起動します。
"""
import argparse
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import MachineConfig
from .main_window import MainWindow


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8-tracer",
        description="CHIP-8 interpreter with an instruction tracer",
    )
    parser.add_argument("program", nargs="?", help="Raw program image (.ch8) or Intel HEX file to load")
    parser.add_argument("--config", help="Machine config (YAML)")
    parser.add_argument("--scale", type=int, help="Integer display scale factor (overrides the config)")
    parser.add_argument("--run", action="store_true", help="Start running immediately after loading")
    return parser


# @intent:responsibility 引数から設定を組み立て、アプリケーションを起動してメインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = MachineConfig()
    if args.config:
        try:
            config = ConfigLoader().load_from_file(args.config)
        except (OSError, ValueError) as e:
            parser.exit(1, f"chip8-tracer: cannot load config {args.config}: {e}\n")
    if args.scale is not None:
        if args.scale <= 0:
            parser.error("--scale must be a positive integer")
        config.display.scale = args.scale

    program = args.program or config.program

    app = QApplication.instance() or QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if program:
        try:
            main_win.load_program(program)
        except (OSError, ValueError) as e:
            parser.exit(1, f"chip8-tracer: cannot load program {program}: {e}\n")
    main_win.show()
    if program and args.run:
        main_win.start()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
