"""Description and body synthesis.

Produces the short imperative description of a change set, an optional
more detailed alternative, and a file listing body for large changes.
"""

from pathlib import PurePosixPath
from typing import Optional

from commitgenie.models import ChangeSet, FileChange, FileStatus, FileTypeCounts, StatusCounts

_SINGLE_FILE_VERBS = {
    FileStatus.ADDED: "add",
    FileStatus.DELETED: "remove",
    FileStatus.MODIFIED: "update",
    FileStatus.RENAMED: "rename",
    FileStatus.UNKNOWN: "update",
}

_HOMOGENEOUS_PHRASES = [
    ("test", "update test files"),
    ("docs", "update documentation"),
    ("config", "update configuration"),
]

_CATEGORY_NOUNS = {
    "test": ("test file", "test files"),
    "docs": ("doc", "docs"),
    "config": ("config file", "config files"),
    "source": ("source file", "source files"),
}

_SINGLE_FILE_NOUNS = {
    "test": "tests",
    "docs": "documentation",
    "config": "configuration",
    "source": "module",
}

# Maximum files listed per status group in a body
MAX_BODY_FILES = 10

LARGE_CHANGE_FILES = 3
LARGE_CHANGE_LINES = 100


def pluralize(count: int, noun: str = "file", plural: Optional[str] = None) -> str:
    """Return "1 file" / "3 files"."""
    if count == 1:
        return f"{count} {noun}"
    return f"{count} {plural or noun + 's'}"


def is_large_change(change_set: ChangeSet) -> bool:
    """A change is large at 3+ files or 100+ changed lines."""
    return (
        change_set.files_changed >= LARGE_CHANGE_FILES
        or change_set.stats.changed_lines >= LARGE_CHANGE_LINES
    )


def describe(
    file_types: FileTypeCounts,
    status_counts: StatusCounts,
    file_changes: list[FileChange] | tuple[FileChange, ...],
    diff_text: str = "",
) -> str:
    """Produce the primary description, most specific rule first.

    Args:
        file_types: Per-category file counts.
        status_counts: Per-status file counts.
        file_changes: Staged file changes.
        diff_text: Raw staged diff (unused by the built-in rules).

    Returns:
        Lowercase imperative description.
    """
    if len(file_changes) == 1:
        change = file_changes[0]
        return f"{_SINGLE_FILE_VERBS[change.status]} {change.file_name}"

    if file_types.source == 0:
        counts = file_types.as_dict()
        for category, phrase in _HOMOGENEOUS_PHRASES:
            if counts[category] > 0 and counts[category] == file_types.total:
                return phrase

    parts = []
    if status_counts.added:
        parts.append(f"add {pluralize(status_counts.added)}")
    if status_counts.modified:
        parts.append(f"update {pluralize(status_counts.modified)}")
    if status_counts.deleted:
        parts.append(f"remove {pluralize(status_counts.deleted)}")
    if parts:
        return " and ".join(parts)

    return f"update {pluralize(len(file_changes))}"


def describe_alternative(
    file_types: FileTypeCounts,
    status_counts: StatusCounts,
    file_changes: list[FileChange] | tuple[FileChange, ...],
    diff_text: str = "",
    primary: Optional[str] = None,
) -> Optional[str]:
    """Produce a more detailed description, if it differs from the primary.

    Single added or modified files get a phrase naming the file stem and its
    role; multi-file changes get a category-count summary.

    Returns:
        The alternative description, or None when it would equal the primary
        or nothing more specific can be said.
    """
    alternative = None

    if len(file_changes) == 1:
        change = file_changes[0]
        stem = PurePosixPath(change.path.replace("\\", "/")).stem.split(".")[0] or change.file_name
        category = _dominant_category(file_types)
        if change.status == FileStatus.ADDED:
            alternative = f"add {stem} {_SINGLE_FILE_NOUNS[category]}"
        elif change.status == FileStatus.MODIFIED:
            detail = "implementation" if category == "source" else _SINGLE_FILE_NOUNS[category]
            alternative = f"update {stem} {detail}"
    elif len(file_changes) > 1:
        counts = file_types.as_dict()
        summary = [
            pluralize(counts[category], *_CATEGORY_NOUNS[category])
            for category in ("source", "test", "docs", "config")
            if counts[category]
        ]
        alternative = "update " + " and ".join(summary)

    if alternative is None:
        return None
    if primary is None:
        primary = describe(file_types, status_counts, file_changes, diff_text)
    return alternative if alternative != primary else None


def _dominant_category(file_types: FileTypeCounts) -> str:
    counts = file_types.as_dict()
    return max(("source", "test", "docs", "config"), key=lambda c: counts[c])


def generate_body(change_set: ChangeSet) -> Optional[str]:
    """List staged files grouped by status.

    Args:
        change_set: The staged changes.

    Returns:
        Multi-line body, or None for an empty change set.
    """
    groups = [
        ("Added", FileStatus.ADDED),
        ("Modified", FileStatus.MODIFIED),
        ("Deleted", FileStatus.DELETED),
        ("Renamed", FileStatus.RENAMED),
    ]

    sections = []
    for title, status in groups:
        paths = [c.path for c in change_set.changes if c.status == status]
        if not paths:
            continue
        lines = [f"{title}:"]
        lines.extend(f"- {path}" for path in paths[:MAX_BODY_FILES])
        if len(paths) > MAX_BODY_FILES:
            lines.append(f"- ... and {len(paths) - MAX_BODY_FILES} more")
        sections.append("\n".join(lines))

    return "\n\n".join(sections) if sections else None
