# errors.py
from typing import List, Optional


class FlashError(Exception):
    """Base for failures that end a flash invocation with a non-zero exit."""
    exit_code = 1


class ArtifactNotFound(FlashError):
    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        msg = f"Firmware image not found: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class UnsupportedOperation(FlashError):
    def __init__(self, operation: str, guidance: str):
        self.operation = operation
        self.guidance = guidance
        super().__init__(f"'{operation}' is not supported for this board. {guidance}")


class ExternalToolFailure(FlashError):
    def __init__(self, tool: str, exit_code: int, diagnostics: Optional[List[str]] = None):
        self.tool = tool
        self.exit_code = exit_code
        self.diagnostics = diagnostics or []
        msg = f"{tool} exited with status {exit_code}"
        if self.diagnostics:
            msg += ": " + "; ".join(self.diagnostics)
        super().__init__(msg)


class ConfigError(FlashError):
    """The board settings are incomplete or malformed; nothing was resolved or launched."""
