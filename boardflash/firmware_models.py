# firmware_models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class BuildProfile(Enum):
    DEBUG = "debug"
    RELEASE = "release"


class Operation(Enum):
    INSTALL = "install"
    FLASH = "flash"
    FLASH_DEBUG = "flash-debug"
    PROGRAM = "program"

    @classmethod
    def from_name(cls, name: str) -> "Operation":
        return cls(name.strip().lower())


@dataclass(frozen=True)
class OperationSpec:
    profile: BuildProfile
    supported: bool = True
    alias_of: Optional[Operation] = None


OPERATIONS: Dict[Operation, OperationSpec] = {
    Operation.INSTALL: OperationSpec(BuildProfile.RELEASE, alias_of=Operation.FLASH),
    Operation.FLASH: OperationSpec(BuildProfile.RELEASE),
    Operation.FLASH_DEBUG: OperationSpec(BuildProfile.DEBUG),
    Operation.PROGRAM: OperationSpec(BuildProfile.RELEASE, supported=False),
}


def profile_for(operation: Operation) -> BuildProfile:
    return OPERATIONS[operation].profile


def canonical(operation: Operation) -> Operation:
    """Follow aliases, so 'install' dispatches as 'flash'."""
    return OPERATIONS[operation].alias_of or operation


@dataclass(frozen=True)
class Artifact:
    path: str
    profile: BuildProfile


@dataclass(frozen=True)
class FlashCommandSequence:
    """Board preamble plus the fixed init-to-shutdown steps, in order."""
    preamble: str
    artifact: Artifact
    steps: Tuple[str, ...]

    def script(self) -> str:
        return "; ".join((self.preamble,) + self.steps)


@dataclass
class FlashOutcome:
    success: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    raw_output: str = ""
    exit_code: int = 0

    def __bool__(self):
        return self.success
