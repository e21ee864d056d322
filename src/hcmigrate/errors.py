"""Domain errors shared by the migration stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class StageIOError(Exception):
    """Fatal create/read/write/copy/rename failure that halts the batch."""

    path: Path
    message: str
    stage: str
    completed: int = 0

    def __str__(self) -> str:
        return f"{self.stage}: {self.message} (path={self.path}, completed={self.completed})"


@dataclass(slots=True)
class DocumentParseError(Exception):
    """A document could not be turned into any usable markup tree."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class DirectoryValidationError(Exception):
    """Supplied directory is missing or outside the permitted root."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"
