"""Breaking change detection.

Collects evidence of backward-incompatible changes from the staged diff and
file statuses. Four independent checks each contribute at most one reason:

- keyword: a configured keyword appears in the diff
- deleted source: a source file was deleted
- structural: removed exports, changed signatures, removed class members,
  major version bumps (each family contributes at most one reason)
- renamed source: a source file was renamed
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from commitgenie.config import CommitGenieConfig
from commitgenie.diff_utils import DiffLines, iter_file_diffs, split_changed_lines
from commitgenie.file_patterns import compile_custom_patterns, detect_file_type
from commitgenie.models import FileChange, FileStatus


@dataclass(frozen=True)
class BreakingChangeResult:
    """Outcome of breaking change detection."""

    is_breaking: bool
    reasons: tuple[str, ...] = ()


NOT_BREAKING = BreakingChangeResult(is_breaking=False)

_REMOVED_EXPORT_RE = re.compile(
    r"^\s*export\s+(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?"
    r"(?P<kind>function|class|const|let|var|interface|type|enum)\*?\s+(?P<name>[A-Za-z_$][\w$]*)"
)
_REMOVED_MODULE_EXPORT_RE = re.compile(r"^\s*module\.exports(?:\.(?P<name>[A-Za-z_$][\w$]*))?\s*=")

_FUNCTION_RES = [
    re.compile(r"^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\*?\s+(?P<name>[A-Za-z_$][\w$]*)\s*\((?P<params>[^)]*)\)"),
    re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z]\w*)\s*\((?P<params>[^)]*)\)"),
    re.compile(r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?\((?P<params>[^)]*)\)\s*=>"),
    re.compile(r"^\s*(?:pub\s+)fn\s+(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^)]*)\)"),
]

_CLASS_MEMBER_RES = [
    re.compile(r"^\s*(?:public\s+)(?:static\s+)?(?:readonly\s+)?(?:async\s+)?(?P<name>[A-Za-z_$][\w$]*)\s*[(:=;]"),
    re.compile(r"^\s{2,}(?:async\s+)?def\s+(?P<name>[A-Za-z]\w*)\s*\(\s*(?:self|cls)\b"),
]

_MANIFEST_FILES = ("package.json", "pyproject.toml", "Cargo.toml", "setup.py", "setup.cfg", "composer.json")
_VERSION_RE = re.compile(r"""^\s*["']?version["']?\s*[:=]\s*["']v?(?P<major>\d+)\.\d+""", re.IGNORECASE)


def _function_signatures(lines: tuple[str, ...]) -> dict[str, str]:
    signatures: dict[str, str] = {}
    for line in lines:
        for pattern in _FUNCTION_RES:
            match = pattern.match(line)
            if match:
                params = re.sub(r"\s+", "", match.group("params"))
                signatures.setdefault(match.group("name"), params)
                break
    return signatures


def _removed_export(lines: DiffLines, diff_text: str) -> Optional[str]:
    added_names = {m.group("name") for m in map(_REMOVED_EXPORT_RE.match, lines.added) if m}
    for line in lines.removed:
        match = _REMOVED_EXPORT_RE.match(line)
        if match and match.group("name") not in added_names:
            return f"Removed exported {match.group('kind')} '{match.group('name')}'"
        match = _REMOVED_MODULE_EXPORT_RE.match(line)
        if match and not any(_REMOVED_MODULE_EXPORT_RE.match(a) for a in lines.added):
            return f"Removed module export '{match.group('name') or 'module.exports'}'"
    return None


def _changed_signature(lines: DiffLines, diff_text: str) -> Optional[str]:
    removed = _function_signatures(lines.removed)
    added = _function_signatures(lines.added)
    for name, params in removed.items():
        if name not in added:
            return f"Removed function '{name}'"
        if added[name] != params:
            return f"Changed signature of function '{name}'"
    return None


def _removed_class_member(lines: DiffLines, diff_text: str) -> Optional[str]:
    def members(source: tuple[str, ...]) -> list[str]:
        names = []
        for line in source:
            for pattern in _CLASS_MEMBER_RES:
                match = pattern.match(line)
                if match:
                    names.append(match.group("name"))
                    break
        return names

    still_present = set(members(lines.added))
    for name in members(lines.removed):
        if name not in still_present and not name.startswith("_"):
            return f"Removed class member '{name}'"
    return None


def _major_version_bump(lines: DiffLines, diff_text: str) -> Optional[str]:
    for path, section in iter_file_diffs(diff_text):
        if path.replace("\\", "/").split("/")[-1] not in _MANIFEST_FILES:
            continue
        section_lines = split_changed_lines(section)
        old = next((m for m in map(_VERSION_RE.match, section_lines.removed) if m), None)
        new = next((m for m in map(_VERSION_RE.match, section_lines.added) if m), None)
        if old and new and int(new.group("major")) > int(old.group("major")):
            return f"Major version bump in {path} ({old.group('major')}.x -> {new.group('major')}.x)"
    return None


# Ordered structural checks; each family yields at most one reason.
STRUCTURAL_CHECKS: list[tuple[str, Callable[[DiffLines, str], Optional[str]]]] = [
    ("removed-export", _removed_export),
    ("changed-signature", _changed_signature),
    ("removed-class-member", _removed_class_member),
    ("major-version-bump", _major_version_bump),
]


def _keyword_reason(diff_lower: str, keywords: list[str]) -> Optional[str]:
    for keyword in keywords:
        if keyword and keyword.lower() in diff_lower:
            return f"Diff mentions '{keyword}'"
    return None


def detect_breaking_changes(
    diff_text: str,
    file_changes: list[FileChange] | tuple[FileChange, ...],
    config: CommitGenieConfig | None = None,
) -> BreakingChangeResult:
    """Detect evidence of breaking changes.

    Args:
        diff_text: Raw staged diff.
        file_changes: Staged file changes.
        config: Resolved configuration.

    Returns:
        BreakingChangeResult; breaking iff at least one reason was found.
    """
    if config is None:
        config = CommitGenieConfig()

    settings = config.breaking_change_detection
    if not settings.enabled:
        return NOT_BREAKING

    extra_patterns = compile_custom_patterns(config.custom_patterns)
    reasons: list[str] = []

    keyword_reason = _keyword_reason(diff_text.lower(), settings.keywords)
    if keyword_reason:
        reasons.append(keyword_reason)

    deleted_sources = [
        c.path for c in file_changes
        if c.status == FileStatus.DELETED and detect_file_type(c.path, extra_patterns) == "source"
    ]
    if deleted_sources:
        reasons.append(f"Deleted source file: {', '.join(deleted_sources[:3])}"
                       + (f" (+{len(deleted_sources) - 3} more)" if len(deleted_sources) > 3 else ""))

    lines = split_changed_lines(diff_text)
    for _family, check in STRUCTURAL_CHECKS:
        reason = check(lines, diff_text)
        if reason:
            reasons.append(reason)

    renamed_sources = [
        c.path for c in file_changes
        if c.status == FileStatus.RENAMED and detect_file_type(c.path, extra_patterns) == "source"
    ]
    if renamed_sources:
        reasons.append(f"Renamed source file may break imports: {renamed_sources[0]}")

    unique = tuple(dict.fromkeys(reasons))
    return BreakingChangeResult(is_breaking=bool(unique), reasons=unique)
