"""Unified diff helpers shared by the classifier and breaking-change detector.

Contains:
- DiffLines: Added and removed lines of a diff
- iter_body_lines: Diff lines outside file and hunk headers
- split_changed_lines: Extract added/removed lines
- iter_file_diffs: Split a multi-file diff into per-file sections
- keyword_text: Lowercase text that keyword rules are matched against
- extract_symbols: Names of declared functions/classes/exports in lines
- truncate_diff: Cap diff text at a fixed size
"""

import re
from dataclasses import dataclass

# Lines that may appear between "diff --git" and the first hunk of a file
_HEADER_PREFIXES = ("index ", "--- ", "+++ ", "new file mode", "deleted file mode", "similarity index",
                    "rename from", "rename to", "old mode", "new mode", "Binary files")

_FILE_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")

# Declarations that introduce a named symbol. Group "name" holds the symbol.
SYMBOL_PATTERNS = [
    re.compile(r"^\s*export\s+(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?"
               r"(?:function\*?|class|const|let|var|interface|type|enum)\s+(?P<name>[A-Za-z_$][\w$]*)"),
    re.compile(r"^\s*(?:async\s+)?function\*?\s+(?P<name>[A-Za-z_$][\w$]*)\s*\("),
    re.compile(r"^\s*(?:abstract\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)"),
    re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z]\w*)\s*\("),
    re.compile(r"^\s*(?:pub\s+)?fn\s+(?P<name>[A-Za-z_]\w*)\s*[<(]"),
    re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Z]\w*)\s*\("),
    re.compile(r"^\s*module\.exports\.(?P<name>[A-Za-z_$][\w$]*)\s*="),
]


@dataclass(frozen=True)
class DiffLines:
    """Added and removed lines of a diff, without their +/- markers."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def churn_ratio(self) -> float:
        """min(added, removed) / max(added, removed); 0.0 when nothing changed."""
        larger = max(len(self.added), len(self.removed))
        if larger == 0:
            return 0.0
        return min(len(self.added), len(self.removed)) / larger


def iter_body_lines(diff_text: str):
    """Yield the lines of a diff that are not file or hunk headers.

    "--- " and "+++ " lines are headers only between a "diff --git" line and
    the first "@@" of that file. Inside a hunk they are a removed "-- ..." or
    an added "++ ..." line. A snippet without a "diff --git" line is
    treated as hunk body once its leading header lines end.

    Args:
        diff_text: Raw diff text.

    Yields:
        Body lines, markers included.
    """
    in_header = True
    for line in diff_text.splitlines():
        if line.startswith("diff --git"):
            in_header = True
            continue
        if line.startswith("@@"):
            in_header = False
            continue
        if in_header:
            if line.startswith(_HEADER_PREFIXES):
                continue
            in_header = False
        yield line


def split_changed_lines(diff_text: str) -> DiffLines:
    """Extract added and removed lines from a unified diff.

    Args:
        diff_text: Raw diff text.

    Returns:
        DiffLines with markers stripped.
    """
    added = []
    removed = []
    for line in iter_body_lines(diff_text):
        if line.startswith("+"):
            added.append(line[1:])
        elif line.startswith("-"):
            removed.append(line[1:])
    return DiffLines(added=tuple(added), removed=tuple(removed))


def keyword_text(diff_text: str) -> str:
    """Return the lowercase text keyword rules are matched against.

    Changed lines are used when the diff has any; otherwise all non-header
    lines (a bare snippet is treated as changed text).

    Args:
        diff_text: Raw diff text.

    Returns:
        Lowercased text.
    """
    lines = split_changed_lines(diff_text)
    if lines.added or lines.removed:
        return "\n".join(lines.removed + lines.added).lower()
    return "\n".join(iter_body_lines(diff_text)).lower()


def iter_file_diffs(diff_text: str) -> list[tuple[str, str]]:
    """Split a multi-file diff into (path, section) pairs.

    Text before the first file header is returned under an empty path.

    Args:
        diff_text: Raw diff text.

    Returns:
        List of (path, diff section) tuples in diff order.
    """
    sections: list[tuple[str, list[str]]] = []
    current_path = ""
    current_lines: list[str] = []

    for line in diff_text.splitlines():
        match = _FILE_HEADER_RE.match(line)
        if match:
            if current_lines:
                sections.append((current_path, current_lines))
            current_path = match.group(2)
            current_lines = [line]
        else:
            current_lines.append(line)

    if current_lines:
        sections.append((current_path, current_lines))

    return [(path, "\n".join(lines)) for path, lines in sections]


def extract_symbols(lines: tuple[str, ...] | list[str]) -> list[str]:
    """Return declared symbol names in order of appearance, without duplicates."""
    names: list[str] = []
    for line in lines:
        for pattern in SYMBOL_PATTERNS:
            match = pattern.match(line)
            if match:
                name = match.group("name")
                if name not in names:
                    names.append(name)
                break
    return names


def truncate_diff(diff_text: str, max_chars: int = 3000) -> str:
    """Truncate diff text to max_chars, marking the cut."""
    if len(diff_text) <= max_chars:
        return diff_text
    return diff_text[:max_chars] + "\n...(truncated)"
