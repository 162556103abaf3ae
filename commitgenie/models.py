"""Data models shared across commitgenie.

Contains:
- FileStatus: Status of a staged file
- FileChange: A single staged file and its status
- DiffStats / ChangeSet: The staged changes of one run
- FileTypeCounts: Per-category file counts
- ClassificationResult: Output of the analysis stage
- TicketReference: Ticket inferred from the branch name
- HistoryProfile: Style statistics learned from recent commits
- CommitMessageVariant: A rendered commit message candidate
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class FileStatus(Enum):
    """Status of a staged file."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> "FileStatus":
        """Map a porcelain status letter to a FileStatus.

        Args:
            code: Status letter from `git status --porcelain` (A, M, D, R, C...).

        Returns:
            The matching FileStatus, UNKNOWN for anything unrecognised.
        """
        return _STATUS_CODES.get(code.strip().upper()[:1], cls.UNKNOWN)


_STATUS_CODES = {
    "A": FileStatus.ADDED,
    "C": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
}


class CommitType(str, Enum):
    """Commit type labels produced by the classifier."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"
    PERF = "perf"


@dataclass(frozen=True)
class FileChange:
    """A single staged file."""

    status: FileStatus
    path: str

    @property
    def file_name(self) -> str:
        return self.path.replace("\\", "/").rstrip("/").split("/")[-1]


@dataclass(frozen=True)
class DiffStats:
    """Aggregate statistics of the staged diff."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def changed_lines(self) -> int:
        return self.insertions + self.deletions


@dataclass(frozen=True)
class ChangeSet:
    """Ordered staged file changes plus their diff statistics."""

    changes: tuple[FileChange, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)

    @classmethod
    def build(cls, changes: list[FileChange], stats: Optional[DiffStats] = None) -> "ChangeSet":
        """Create a ChangeSet, deriving files_changed when no stats are given."""
        if stats is None:
            stats = DiffStats(files_changed=len(changes))
        return cls(changes=tuple(changes), stats=stats)

    @property
    def paths(self) -> list[str]:
        return [change.path for change in self.changes]

    @property
    def files_changed(self) -> int:
        return max(self.stats.files_changed, len(self.changes))

    def __len__(self) -> int:
        return len(self.changes)


@dataclass(frozen=True)
class FileTypeCounts:
    """Number of staged files per category."""

    test: int = 0
    docs: int = 0
    config: int = 0
    source: int = 0

    @property
    def total(self) -> int:
        return self.test + self.docs + self.config + self.source

    def as_dict(self) -> dict[str, int]:
        return {"test": self.test, "docs": self.docs, "config": self.config, "source": self.source}


@dataclass(frozen=True)
class StatusCounts:
    """Number of staged files per status."""

    added: int = 0
    modified: int = 0
    deleted: int = 0
    renamed: int = 0

    @classmethod
    def from_changes(cls, changes: list[FileChange] | tuple[FileChange, ...]) -> "StatusCounts":
        statuses = [c.status for c in changes]
        return cls(
            added=statuses.count(FileStatus.ADDED),
            modified=statuses.count(FileStatus.MODIFIED),
            deleted=statuses.count(FileStatus.DELETED),
            renamed=statuses.count(FileStatus.RENAMED),
        )


@dataclass(frozen=True)
class GroupedFileChanges:
    """Staged paths grouped by status."""

    added: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    renamed: tuple[str, ...] = ()

    @classmethod
    def from_changes(cls, changes: list[FileChange] | tuple[FileChange, ...]) -> "GroupedFileChanges":
        def paths_with(status: FileStatus) -> tuple[str, ...]:
            return tuple(c.path for c in changes if c.status == status)

        return cls(
            added=paths_with(FileStatus.ADDED),
            modified=paths_with(FileStatus.MODIFIED),
            deleted=paths_with(FileStatus.DELETED),
            renamed=paths_with(FileStatus.RENAMED),
        )


@dataclass(frozen=True)
class ClassificationResult:
    """Result of analysing one change set."""

    commit_type: CommitType
    scope: Optional[str]
    description: str
    file_changes: GroupedFileChanges
    file_types: FileTypeCounts
    is_large_change: bool
    is_breaking_change: bool = False
    breaking_reasons: tuple[str, ...] = ()
    alternative_description: Optional[str] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class TicketReference:
    """Ticket or issue identifier inferred from the branch name."""

    id: str
    source: str = "branch"  # branch | custom
    prefix: str = "Refs:"


@dataclass(frozen=True)
class HistoryProfile:
    """Style statistics learned from recent commit subjects."""

    uses_emojis: bool
    uses_conventional_commits: bool
    common_scopes: tuple[str, ...] = ()
    common_verbs: tuple[str, ...] = ()
    average_length: int = 50
    emoji_frequency: dict[str, int] = field(default_factory=dict)
    type_frequency: dict[str, int] = field(default_factory=dict)


class CommitMessageVariant(BaseModel):
    """A commit message candidate.

    Attributes:
        id: Sequential id, starting at 1 in emission order.
        label: Human-readable label (Recommended, No Scope, ...).
        type: Commit type.
        scope: Scope, or None.
        description: Header description.
        body: Optional multi-line body.
        is_breaking: Whether the breaking marker and footer apply.
        breaking_reasons: Evidence for the breaking change.
        ticket: Ticket reference rendered as a footer.
        emoji: Emoji prefix, or None when emojis are disabled.
        full: The rendered message.
    """

    id: int
    label: str
    type: CommitType
    scope: Optional[str] = None
    description: str
    body: Optional[str] = None
    is_breaking: bool = False
    breaking_reasons: list[str] = []
    ticket: Optional[TicketReference] = None
    emoji: Optional[str] = None
    full: str = ""

    @field_validator("scope", mode="before")
    @classmethod
    def blank_scope_is_none(cls, v):
        """Ensure scope is either None or a non-empty string."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("breaking_reasons", mode="before")
    @classmethod
    def ensure_reasons_list(cls, v):
        """Ensure breaking_reasons is a list."""
        if v is None:
            return []
        return list(v)
