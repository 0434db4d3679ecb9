# flasher_vm.py
from __future__ import annotations

import shlex
from typing import Callable, Optional

from boardflash.config_service import load_config, save_config, make_board_config
from boardflash.errors import ExternalToolFailure, FlashError
from boardflash.firmware_models import FlashOutcome, Operation, canonical
from boardflash.flasher_service import FlasherService


class FlasherViewModel:
    """
    UI-agnostic dispatch logic between the CLI and FlasherService.

    Responsibilities:
      - Load/save configuration and build the FlasherService from it
      - Run one operation through resolve -> build_sequence -> execute
      - Emit status/log/completion events for the view to render

    The view may set these callbacks (all optional):
      - on_status:    Callable[[str, bool], None]      # (message, is_error)
      - on_log:       Callable[[str, bool], None]      # (message, is_error)
      - on_completed: Callable[[FlashOutcome], None]
    """

    # ---------- lifecycle ----------
    def __init__(self, base_dir: str, overrides: Optional[dict] = None):
        self.base_dir = base_dir
        self.config = load_config(base_dir)
        self.config.update({k: v for k, v in (overrides or {}).items() if v is not None})

        self.on_status: Optional[Callable[[str, bool], None]] = None
        self.on_log: Optional[Callable[[str, bool], None]] = None
        self.on_completed: Optional[Callable[[FlashOutcome], None]] = None

        self._svc: Optional[FlasherService] = None

    # ---------- helpers ----------
    def _emit_status(self, msg: str, is_error: bool = False) -> None:
        if self.on_status:
            self.on_status(msg, is_error)

    def _complete(self, outcome: FlashOutcome) -> FlashOutcome:
        if self.on_completed:
            self.on_completed(outcome)
        return outcome

    def _make_service(self) -> FlasherService:
        return FlasherService(make_board_config(self.config))

    @property
    def svc(self) -> FlasherService:
        """Built on first use so a bad board setting only fails the commands that need it."""
        if self._svc is None:
            self._svc = self._make_service()
        return self._svc

    @svc.setter
    def svc(self, value: FlasherService) -> None:
        self._svc = value

    # ---------- queries ----------
    def get_config(self) -> dict:
        return self.config

    # ---------- commands ----------
    def dispatch(self, name: str, dry_run: bool = False, build: bool = True) -> FlashOutcome:
        """Run one user-facing operation to completion; never raises FlashError."""
        try:
            requested = Operation.from_name(name)
        except ValueError:
            msg = f"Unknown operation '{name}'"
            self._emit_status(msg, True)
            return self._complete(FlashOutcome(False, [msg], exit_code=2))

        operation = canonical(requested)
        if operation is not requested:
            self._emit_status(f"'{requested.value}' runs '{operation.value}'")

        try:
            artifact = self.svc.resolve(operation)
            sequence = self.svc.build_sequence(operation, artifact)

            if dry_run:
                self._emit_status(f"Would flash {artifact.path}")
                if self.on_log:
                    self.on_log(shlex.join(self.svc.command_line(sequence)), False)
                return self._complete(FlashOutcome(True))

            self._emit_status(f"Checking for {artifact.profile.value} image {artifact.path}...")
            self.svc.ensure_artifact(artifact, build=build)

            self._emit_status(f"Flashing {self.svc.board.platform} with {artifact.path}. Please wait...")
            result = self.svc.execute(sequence)
            if self.on_log and result.output:
                self.on_log("--- OpenOCD output ---\n" + result.output, False)

            outcome = self.svc.analyze_output(result)
            if not outcome.success:
                raise ExternalToolFailure(
                    self.svc.board.openocd_path, outcome.exit_code, outcome.errors
                )
        except FlashError as e:
            self._emit_status(str(e), True)
            return self._complete(FlashOutcome(False, [str(e)], exit_code=e.exit_code))

        for warning in outcome.warnings:
            self._emit_status(warning, False)
        self._emit_status("Flashing completed successfully!", False)
        return self._complete(outcome)

    # ---------- configuration ----------
    def save_config(self) -> str:
        """Persist the effective configuration; the service is rebuilt from it on next use."""
        path = save_config(self.base_dir, self.config)
        self._svc = None
        self._emit_status(f"Configuration saved to {path}", False)
        return path
