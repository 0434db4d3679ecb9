# views/cli_view.py
from __future__ import annotations

import os
import sys
import json
import argparse
from typing import List, Optional

from ..config_service import BOARD_PRESETS
from ..firmware_models import Operation, OPERATIONS
from ..viewmodels.flasher_vm import FlasherViewModel
from ..utils import write_log, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boardflash",
        description="Flash board firmware through OpenOCD.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config-dir", default=os.getcwd(),
                        help="Directory holding boardflash.json (default: current directory)")
    parser.add_argument("--board", help="Board preset name")
    parser.add_argument("--root", dest="root_dir", help="Root of the firmware tree")
    parser.add_argument("--openocd", dest="openocd_path", help="OpenOCD executable")

    sub = parser.add_subparsers(dest="command", metavar="command")
    for op in Operation:
        spec = OPERATIONS[op]
        if not spec.supported:
            help_text = "not supported; see the board README"
        elif spec.alias_of:
            help_text = f"alias of {spec.alias_of.value}"
        else:
            help_text = f"flash the {spec.profile.value} image"
        p = sub.add_parser(op.value, help=help_text)
        p.add_argument("--dry-run", action="store_true",
                       help="Print the OpenOCD command instead of running it")
        p.add_argument("--no-build", action="store_true",
                       help="Fail instead of building a missing image")

    sub.add_parser("boards", help="List board presets")
    p = sub.add_parser("config", help="Show the effective configuration")
    p.add_argument("--save", action="store_true", help="Write it to boardflash.json")
    return parser


class FlasherCli:
    """Console 'View' layer. No dispatch logic lives here, it's all in the ViewModel."""

    def __init__(self, vm: FlasherViewModel, stream=None):
        self.vm = vm
        self.stream = stream or sys.stdout
        self.vm.on_status = self._on_status
        self.vm.on_log = self._on_log

    # ===== VM event handlers =====
    def _on_status(self, msg: str, is_error: bool):
        write_log(self.stream, msg, is_error)

    def _on_log(self, msg: str, is_error: bool):
        write_log(self.stream, msg, is_error)

    # ===== commands =====
    def run_operation(self, name: str, dry_run: bool, build: bool) -> int:
        outcome = self.vm.dispatch(name, dry_run=dry_run, build=build)
        if outcome.success:
            return 0
        if outcome.exit_code < 0:
            # killed by signal N: report it the way a shell does
            return 128 + abs(outcome.exit_code)
        return outcome.exit_code or 1

    def show_config(self, save: bool) -> int:
        self.stream.write(json.dumps(self.vm.get_config(), indent=2) + "\n")
        if save:
            self.vm.save_config()
        return 0


def list_boards(stream) -> int:
    for name, preset in sorted(BOARD_PRESETS.items()):
        stream.write(f"{name}\t{preset['target']}\t{preset['board_config']}\n")
    return 0


def run(argv: Optional[List[str]] = None, stream=None) -> int:
    stream = stream or sys.stdout
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    # 'install' is the default entry point
    command = args.command or Operation.INSTALL.value
    if command == "boards":
        return list_boards(stream)

    overrides = {"board": args.board, "root_dir": args.root_dir, "openocd_path": args.openocd_path}
    cli = FlasherCli(FlasherViewModel(args.config_dir, overrides), stream)

    if command == "config":
        return cli.show_config(args.save)
    return cli.run_operation(
        command,
        dry_run=getattr(args, "dry_run", False),
        build=not getattr(args, "no_build", False),
    )
