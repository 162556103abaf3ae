"""Git diff utilities.

Contains:
- get_staged_diff: Get the full staged diff
- parse_shortstat: Parse `git diff --shortstat` output into DiffStats
- get_diff_stats: Get aggregate statistics of the staged diff
"""

import re

from commitgenie.git.runner import _run_git_command
from commitgenie.models import DiffStats

_FILES_RE = re.compile(r"(\d+) files? changed")
_INSERTIONS_RE = re.compile(r"(\d+) insertions?")
_DELETIONS_RE = re.compile(r"(\d+) deletions?")


def get_staged_diff() -> str:
    """Get the staged diff.

    Returns:
        The raw `git diff --cached` output.

    Raises:
        GitError: If git diff fails.
    """
    return _run_git_command(["diff", "--cached"], strip=False)


def parse_shortstat(output: str) -> DiffStats:
    """Parse a shortstat summary line.

    Args:
        output: e.g. " 3 files changed, 10 insertions(+), 2 deletions(-)".

    Returns:
        DiffStats; missing counts are 0.
    """

    def count(pattern: re.Pattern) -> int:
        match = pattern.search(output)
        return int(match.group(1)) if match else 0

    return DiffStats(
        files_changed=count(_FILES_RE),
        insertions=count(_INSERTIONS_RE),
        deletions=count(_DELETIONS_RE),
    )


def get_diff_stats() -> DiffStats:
    """Get aggregate statistics of the staged diff.

    Raises:
        GitError: If git diff fails.
    """
    return parse_shortstat(_run_git_command(["diff", "--cached", "--shortstat"]))
