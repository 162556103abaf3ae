"""Scope inference for commitgenie.

Provides deterministic scope inference from staged paths to generate
commit message scopes like feat(api), fix(ui), etc.

Strategies, in precedence order:
- mapping (all): a configured mapping matches every changed path
- mapping (majority): a configured mapping matches more than half of them
- positional: the first path segment is a conventional scope name

History-derived scopes are a separate fallback (see commitgenie.history).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from commitgenie.config import CommitGenieConfig, ScopeMapping


class ScopeStrategy(Enum):
    """Strategy that produced a scope."""

    MAPPING = "mapping"
    MAPPING_MAJORITY = "mapping-majority"
    POSITIONAL = "positional"
    HISTORY = "history"
    NONE = "none"


# First path segments accepted as scopes without configuration
CONVENTIONAL_SCOPES = [
    "api",
    "ui",
    "auth",
    "db",
    "core",
    "utils",
    "components",
    "services",
]


@dataclass
class ScopeResult:
    """Result of scope inference."""

    scope: Optional[str]
    confidence: float  # 0.0 to 1.0
    strategy_used: ScopeStrategy
    reason: str  # Human-readable explanation


def normalize_path(path: str) -> str:
    """Normalize a file path for consistent processing.

    Args:
        path: The file path to normalize.

    Returns:
        Normalized path with forward slashes.
    """
    return path.replace("\\", "/").strip("/")


def get_path_segments(path: str) -> list[str]:
    """Split a path into its segments, including the file name.

    Args:
        path: The file path.

    Returns:
        List of path segments.
    """
    normalized = normalize_path(path)
    return normalized.split("/") if normalized else []


def _count_matches(files: list[str], mapping: ScopeMapping) -> int:
    pattern = mapping.pattern.replace("\\", "/")
    return sum(1 for f in files if pattern in normalize_path(f))


def infer_scope_from_mapping(
    files: list[str],
    mappings: list[ScopeMapping],
) -> Optional[ScopeResult]:
    """Infer scope using configured path mappings.

    A mapping matching every file wins over one matching a majority; within
    each pass the first mapping in configuration order wins.

    Args:
        files: List of staged file paths.
        mappings: Configured pattern-to-scope mappings.

    Returns:
        ScopeResult if a mapping matches, None otherwise.
    """
    if not mappings or not files:
        return None

    for mapping in mappings:
        if _count_matches(files, mapping) == len(files):
            return ScopeResult(
                scope=mapping.scope,
                confidence=1.0,
                strategy_used=ScopeStrategy.MAPPING,
                reason=f"Mapping '{mapping.pattern}' matched all {len(files)} files",
            )

    for mapping in mappings:
        matched = _count_matches(files, mapping)
        if matched > len(files) / 2:
            return ScopeResult(
                scope=mapping.scope,
                confidence=matched / len(files),
                strategy_used=ScopeStrategy.MAPPING_MAJORITY,
                reason=f"Mapping '{mapping.pattern}' matched {matched}/{len(files)} files",
            )

    return None


def infer_scope_from_position(files: list[str]) -> Optional[ScopeResult]:
    """Infer scope from the first segment of the first changed path.

    Args:
        files: List of staged file paths.

    Returns:
        ScopeResult if the segment is a conventional scope name, None otherwise.
    """
    if not files:
        return None

    segments = get_path_segments(files[0])
    if len(segments) < 2:
        return None

    candidate = segments[0]
    if candidate.lower() not in CONVENTIONAL_SCOPES:
        return None

    return ScopeResult(
        scope=candidate,
        confidence=1.0 / len(files),
        strategy_used=ScopeStrategy.POSITIONAL,
        reason=f"First path segment '{candidate}' is a conventional scope",
    )


def infer_scope(files: list[str], config: CommitGenieConfig | None = None) -> ScopeResult:
    """Infer scope from staged files.

    Args:
        files: List of staged file paths.
        config: Resolved configuration.

    Returns:
        ScopeResult with the inferred scope or a None scope.
    """
    if config is None:
        config = CommitGenieConfig()

    if not files:
        return ScopeResult(
            scope=None,
            confidence=1.0,
            strategy_used=ScopeStrategy.NONE,
            reason="No files to analyze",
        )

    result = infer_scope_from_mapping(files, config.scopes) or infer_scope_from_position(files)
    if result:
        return result

    return ScopeResult(
        scope=None,
        confidence=0.0,
        strategy_used=ScopeStrategy.NONE,
        reason="Could not determine scope from file paths",
    )


def resolve_scope(paths: list[str], config: CommitGenieConfig | None = None) -> Optional[str]:
    """Return the scope name for the changed paths, or None."""
    return infer_scope(paths, config).scope
