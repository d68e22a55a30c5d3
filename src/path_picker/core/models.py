from __future__ import annotations

import enum
from dataclasses import dataclass


class CompletionKind(str, enum.Enum):
    """Which candidate kinds the generator is allowed to emit."""

    ALL = "all"
    DIRECTORY = "directory"
    FILE = "file"

    @property
    def allows_directories(self) -> bool:
        return self is not CompletionKind.FILE

    @property
    def allows_files(self) -> bool:
        # Create suggestions count as files.
        return self is not CompletionKind.DIRECTORY


class CandidateKind(enum.Enum):
    DIRECTORY = "directory"
    FILE = "file"
    CREATE = "create"


@dataclass(frozen=True)
class Candidate:
    """A single suggested completion."""

    label: str  # Absolute path; applied as the input value on selection
    detail: str  # e.g. "Open src/", "Create/Rename to: notes.md"
    kind: CandidateKind
