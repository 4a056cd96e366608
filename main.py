# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import TextIO

from debug import Debug, silent
from errors import EnigmaError
from utilities import load_machine, process

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches for one run of the simulator."""

    verbose: bool = False           # trace every key-press on the log
    block: int = 5                  # output group size
    log_to: str | None = None       # extra log file


def make_debug(cfg: Config) -> Debug:
    if not (cfg.verbose or cfg.log_to):
        return silent()
    Debug.configure(log_to=cfg.log_to)
    debug = Debug()
    debug.enable("convert", "setup")
    if cfg.verbose:
        debug.enable("stepping")
    return debug


# ────────────────────────────────────────────────────────────────────────
#  1. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="enigma",
        description="Encrypt or decrypt with a configured rotor machine",
    )
    p.add_argument("config", metavar="CONFIG", help="Configuration file (text or .json), or a built-in suite name (M3, M4).")
    p.add_argument("input", metavar="INPUT", nargs="?", help="File of setup and message lines. Default: standard input.")
    p.add_argument("output", metavar="OUTPUT", nargs="?", help="File for converted messages. Default: standard output.")
    p.add_argument("--verbose", action="store_true", help="Log rotor positions and the signal path of every symbol.")
    p.add_argument("--log-file", dest="log_file", metavar="FILE", help="Also write the log to FILE.")
    p.add_argument("--block", type=int, default=5, help="Output group size; 0 disables grouping. Default: 5")
    return p.parse_args(argv)


def run(cfg: Config, config: str, src: TextIO, dst: TextIO) -> None:
    """Configure a machine from `config` and convert every line of `src`."""
    machine = load_machine(config, make_debug(cfg))
    for line in process(machine, src, cfg.block):
        print(line, file=dst)


# ────────────────────────────────────────────────────────────────────────
#  2. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = Config(verbose=args.verbose, block=args.block, log_to=args.log_file)

    try:
        src = open(args.input, encoding="utf-8") if args.input else sys.stdin
        try:
            dst = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
            try:
                run(cfg, args.config, src, dst)
            finally:
                if dst is not sys.stdout:
                    dst.close()
        finally:
            if src is not sys.stdin:
                src.close()
    except (EnigmaError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
