"""Domain models for SAS URI building."""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult

from azure.storage.blob import BlobSasPermissions

from .policy import Duration


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line and character offset in a text document."""
    line: int
    character: int


@dataclass(frozen=True)
class Selection:
    """Highlighted range between two positions."""
    start: Position
    end: Position

    def __post_init__(self):
        # Normalize reversed selections so start always precedes end
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class BlobLocator:
    """Account, container and blob named by a blob URI."""
    account_name: str
    container: str
    blob: str


@dataclass
class PendingEntry:
    """A selection waiting to be rewritten; secret is None when skipped."""
    selection: Selection
    url: Optional[SplitResult] = None
    locator: Optional[BlobLocator] = None
    secret: Optional[str] = None

    def __repr__(self) -> str:
        # Never expose account keys through logs or tracebacks
        return (
            f"PendingEntry(selection={self.selection!r}, locator={self.locator!r}, "
            f"secret={'***REDACTED***' if self.secret else None})"
        )


@dataclass(frozen=True)
class PolicyChoice:
    """Validity window and permissions applied to every entry in a run."""
    validity: Duration
    permission: BlobSasPermissions


@dataclass
class BuildResult:
    """Outcome of one command run."""
    rewritten: int = 0
    skipped: int = 0
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
