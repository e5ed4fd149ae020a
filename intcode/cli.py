"""
Command-line runner for Intcode programs.

Usage:
    python -m intcode program.txt -i 1
    python -m intcode program.txt --set 1=12 --set 2=2 --dump 0
    python -m intcode program.txt -i 5 --lenient -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .errors import IntcodeError
from .loader import load_program, parse_inputs
from .machine import IntcodeMachine, RunStatus

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_AWAITING_INPUT = 3


def parse_patch(text: str) -> tuple[int, int]:
    addr, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got {text!r}")
    try:
        return int(addr), int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers in {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run an Intcode program",
        prog="python -m intcode",
    )
    parser.add_argument("program", help="Path to a comma-separated Intcode program")
    parser.add_argument("-i", "--input", default="",
                        help="Input values, comma or space separated")
    parser.add_argument("--set", dest="patches", type=parse_patch, action="append", default=[],
                        metavar="ADDR=VALUE", help="Write memory before running (repeatable)")
    parser.add_argument("--dump", type=int, action="append", default=[], metavar="ADDR",
                        help="Print memory at ADDR after the run (repeatable)")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Abort after this many instructions")
    parser.add_argument("--lenient", action="store_true",
                        help="Stop quietly when input runs out instead of failing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log machine lifecycle")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    path = Path(args.program)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_ERROR

    try:
        machine = IntcodeMachine(load_program(path), max_steps=args.max_steps)
        for addr, value in args.patches:
            machine.memory.write(addr, value)
        status = machine.run(parse_inputs(args.input))
        dumps = [(addr, machine.memory.read(addr)) for addr in args.dump]
    except IntcodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    outputs = machine.drain_output()
    if outputs:
        print(",".join(str(v) for v in outputs))
    for addr, value in dumps:
        print(f"[{addr}] = {value}")

    if status == RunStatus.AWAITING_INPUT:
        if not args.lenient:
            print(f"Error: input exhausted at pc={machine.pc}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Awaiting input at pc={machine.pc}", file=sys.stderr)
        return EXIT_AWAITING_INPUT
    return EXIT_OK
