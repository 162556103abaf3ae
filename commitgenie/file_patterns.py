"""File categorisation for staged paths.

Each path is matched against an ordered table of patterns; the first match
decides its category (test, docs, config). Paths matching nothing are source.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from commitgenie.config import CustomPattern
from commitgenie.models import FileChange, FileTypeCounts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePattern:
    """A path pattern and the category it assigns."""

    pattern: re.Pattern
    type: str  # test | docs | config | source


FILE_PATTERNS = [
    # Test files
    FilePattern(re.compile(r"\.(test|spec)\.(ts|js|tsx|jsx|mjs|cjs)$"), "test"),
    FilePattern(re.compile(r"(^|/)__tests__/"), "test"),
    FilePattern(re.compile(r"(^|/)tests?/"), "test"),
    FilePattern(re.compile(r"(^|/)test_[^/]+\.py$"), "test"),
    FilePattern(re.compile(r"_test\.(py|go)$"), "test"),
    # Documentation
    FilePattern(re.compile(r"\.(md|mdx|rst|adoc)$"), "docs"),
    FilePattern(re.compile(r"(^|/)docs?/"), "docs"),
    FilePattern(re.compile(r"(^|/)(README|CHANGELOG|LICENSE|CONTRIBUTING)(\.(md|mdx|rst|adoc|txt))?$", re.IGNORECASE), "docs"),
    # Configuration
    FilePattern(re.compile(r"\.(json|ya?ml|toml|ini|cfg|lock|config\.js)$"), "config"),
    FilePattern(re.compile(r"\.(eslintrc|prettierrc|babelrc|editorconfig|gitignore|dockerignore|npmrc|nvmrc)"), "config"),
    FilePattern(re.compile(r"(^|/)(package\.json|tsconfig\.json|webpack\.config|vite\.config|setup\.py|Makefile)"), "config"),
    FilePattern(re.compile(r"(^|/)requirements[^/]*\.txt$"), "config"),
    FilePattern(re.compile(r"(^|/)(go\.(mod|sum|work)|Pipfile|Gemfile|pom\.xml|(build|settings)\.gradle(\.kts)?|gradle\.properties)$"), "config"),
    FilePattern(re.compile(r"Dockerfile"), "config"),
]


def compile_custom_patterns(custom_patterns: Iterable[CustomPattern]) -> list[FilePattern]:
    """Compile user-defined patterns, skipping invalid regular expressions.

    Args:
        custom_patterns: Patterns from the configuration.

    Returns:
        Compiled FilePattern list in configuration order.
    """
    compiled = []
    for custom in custom_patterns:
        try:
            compiled.append(FilePattern(re.compile(custom.pattern), custom.type))
        except re.error as e:
            logger.warning("Skipping invalid custom pattern %r: %s", custom.pattern, e)
    return compiled


def detect_file_type(path: str, extra_patterns: Optional[list[FilePattern]] = None) -> str:
    """Return the category of a path.

    Args:
        path: The file path.
        extra_patterns: Patterns checked before the built-in table.

    Returns:
        One of "test", "docs", "config", "source".
    """
    normalized = path.replace("\\", "/")
    for file_pattern in (extra_patterns or []) + FILE_PATTERNS:
        if file_pattern.pattern.search(normalized):
            return file_pattern.type
    return "source"


def count_file_types(
    changes: Iterable[FileChange],
    extra_patterns: Optional[list[FilePattern]] = None,
) -> FileTypeCounts:
    """Count staged files per category.

    Args:
        changes: Staged file changes.
        extra_patterns: Patterns checked before the built-in table.

    Returns:
        FileTypeCounts with exactly one category per path.
    """
    counts = {"test": 0, "docs": 0, "config": 0, "source": 0}
    for change in changes:
        counts[detect_file_type(change.path, extra_patterns)] += 1
    return FileTypeCounts(**counts)
