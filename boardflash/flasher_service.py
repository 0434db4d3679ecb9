# flasher_service.py
import os
import re
import shlex
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from boardflash.config_service import BoardConfig
from boardflash.errors import ArtifactNotFound, ExternalToolFailure, UnsupportedOperation
from boardflash.firmware_models import (
    OPERATIONS, Artifact, BuildProfile, FlashCommandSequence, FlashOutcome, Operation,
    profile_for,
)
from boardflash.openocd_commands import (
    SourceBoardCommand, InitCommand, ResetHaltCommand, WriteImageCommand,
    VerifyImageCommand, ResetCommand, ShutdownCommand
)

logger = logging.getLogger(__name__)

PROGRAM_GUIDANCE = (
    "See the board's README for how to program it and update this command accordingly."
)

# exit status reported when the tool itself cannot be started
TOOL_NOT_STARTED = 127


@dataclass
class ToolResult:
    returncode: int
    output: str = ""


class ProcessRunner:
    """Submit one command string to an external tool and report its exit status."""
    def run(self, command: str) -> ToolResult:
        raise NotImplementedError()


class OpenOcdRunner(ProcessRunner):
    """Runs `openocd -c <script>` to completion and captures its output."""

    def __init__(self, openocd_path: str = "openocd") -> None:
        self.openocd_path = openocd_path

    def command_line(self, script: str) -> List[str]:
        return [self.openocd_path, "-c", script]

    def run(self, command: str) -> ToolResult:
        argv = self.command_line(command)
        logger.debug("Running %s", argv)
        try:
            proc = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            raise ExternalToolFailure(self.openocd_path, TOOL_NOT_STARTED, [str(e)]) from e
        return ToolResult(proc.returncode, (proc.stdout or "") + (proc.stderr or ""))


class BuildRunner(ProcessRunner):
    """Runs a configured build command; its output goes straight to the console."""

    def __init__(self, cwd: Optional[str] = None) -> None:
        self.cwd = cwd

    def run(self, command: str) -> ToolResult:
        argv = shlex.split(command)
        logger.debug("Building with %s in %s", argv, self.cwd or os.getcwd())
        try:
            proc = subprocess.run(argv, cwd=self.cwd)
        except OSError as e:
            logger.error("Build command could not be started: %s", e)
            return ToolResult(TOOL_NOT_STARTED, str(e))
        return ToolResult(proc.returncode)


class FlasherService:
    def __init__(
        self,
        board: BoardConfig,
        runner: Optional[ProcessRunner] = None,
        build_runner: Optional[ProcessRunner] = None,
    ) -> None:
        self.board = board
        self.runner = runner or OpenOcdRunner(board.openocd_path)
        self.build_runner = build_runner or BuildRunner(self._build_dir())

    def _build_dir(self) -> str:
        # Board crates build from boards/<platform> when that layout exists
        board_dir = os.path.join(self.board.root_dir, "boards", self.board.platform)
        return board_dir if os.path.isdir(board_dir) else self.board.root_dir

    def resolve(self, operation: Operation, profile: Optional[BuildProfile] = None) -> Artifact:
        """Compute the artifact path for an operation. Does not touch the disk."""
        expected = profile_for(operation)
        if profile is not None and profile is not expected:
            raise ValueError(
                f"'{operation.value}' uses the {expected.value} profile, not {profile.value}"
            )
        path = os.path.join(
            self.board.root_dir, "target", self.board.target,
            expected.value, f"{self.board.platform}.elf",
        )
        return Artifact(path=path, profile=expected)

    def ensure_artifact(self, artifact: Artifact, build: bool = True) -> Artifact:
        """Make sure the image exists, running the wired build command if it does not."""
        if os.path.isfile(artifact.path):
            return artifact

        command = self.board.build_command(artifact.profile.value)
        if not command or not build:
            raise ArtifactNotFound(artifact.path)

        logger.info("%s missing; running build: %s", artifact.path, command)
        result = self.build_runner.run(command)
        if result.returncode != 0:
            raise ArtifactNotFound(
                artifact.path, f"build exited with status {result.returncode}"
            )
        if not os.path.isfile(artifact.path):
            raise ArtifactNotFound(artifact.path, "build finished without producing it")
        return artifact

    def build_sequence(self, operation: Operation, artifact: Artifact) -> FlashCommandSequence:
        if not OPERATIONS[operation].supported:
            raise UnsupportedOperation(operation.value, PROGRAM_GUIDANCE)

        cmds = [
            InitCommand(),
            ResetHaltCommand(),
            WriteImageCommand(artifact.path),
            VerifyImageCommand(artifact.path),
            ResetCommand(),
            ShutdownCommand(),
        ]
        return FlashCommandSequence(
            preamble=SourceBoardCommand(self.board.board_config).render(),
            artifact=artifact,
            steps=tuple(c.render() for c in cmds),
        )

    def command_line(self, sequence: FlashCommandSequence) -> List[str]:
        """The argv execute() would launch, for dry runs."""
        return [self.board.openocd_path, "-c", sequence.script()]

    def execute(self, sequence: FlashCommandSequence) -> ToolResult:
        """Run OpenOCD once. The exit status is passed through untouched."""
        return self.runner.run(sequence.script())

    def analyze_output(self, result: ToolResult) -> FlashOutcome:
        """
        Turn a finished OpenOCD run into an outcome.
        The exit status decides success; 'Error:' and 'Warn :' lines are
        collected only to explain it.
        """
        text = result.output or ""
        errors = [m.group(0).strip() for m in re.finditer(r"^Error:.*$", text, re.MULTILINE)]
        warnings = [m.group(0).strip() for m in re.finditer(r"^Warn\s*:.*$", text, re.MULTILINE)]
        if result.returncode != 0 and not errors:
            errors = [f"OpenOCD exited with status {result.returncode}"]
        return FlashOutcome(
            success=result.returncode == 0,
            errors=errors if result.returncode != 0 else [],
            warnings=warnings,
            raw_output=text,
            exit_code=result.returncode,
        )
