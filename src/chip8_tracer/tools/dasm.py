# chip8_tracer/tools/dasm.py
"""
コマンドライン逆アセンブラ (chip8-dasm)。

生のプログラムイメージを読み込み、1ワードごとに
"address:<TAB>word<TAB>|<TAB>mnemonic" 形式で標準出力へ書き出します。
"""
import argparse
import sys
from typing import List, Optional

from chip8_tracer.arch.chip8.constants import PROGRAM_OFFSET
from chip8_tracer.arch.chip8.disassembler import disassemble_image, format_listing


def _parse_address(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid address: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"address must be non-negative: {text!r}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8-dasm",
        description="Disassemble a raw CHIP-8 program image",
    )
    parser.add_argument("program", help="Path to the raw program image (.ch8)")
    parser.add_argument(
        "--base",
        type=_parse_address,
        default=PROGRAM_OFFSET,
        help=f"Load address of the first byte (default: {PROGRAM_OFFSET:#05x})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        with open(args.program, "rb") as f:
            data = f.read()
    except OSError as exc:
        print(f"chip8-dasm: cannot read {args.program}: {exc.strerror}", file=sys.stderr)
        return 1

    for line in format_listing(disassemble_image(data, args.base)):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
