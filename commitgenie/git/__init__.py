"""Git access for commitgenie.

This package provides read-only repository facts and the commit side effect:
- exceptions: GitError, GitNotFoundError, NoStagedChangesError
- runner: _run_git_command, get_repo_root, is_git_repository
- status: parse_porcelain_status, get_staged_changes
- diff: get_staged_diff, parse_shortstat, get_diff_stats
- branch: get_branch, get_commit_subjects, commit
"""

# Exceptions
from commitgenie.git.exceptions import (
    GitError,
    GitNotFoundError,
    NoStagedChangesError,
)

# Runner utilities
from commitgenie.git.runner import (
    _run_git_command,
    get_repo_root,
    is_git_repository,
)

# Status utilities
from commitgenie.git.status import (
    get_staged_changes,
    parse_porcelain_status,
)

# Diff utilities
from commitgenie.git.diff import (
    get_diff_stats,
    get_staged_diff,
    parse_shortstat,
)

# Branch and commit utilities
from commitgenie.git.branch import (
    commit,
    get_branch,
    get_commit_subjects,
)


__all__ = [
    # Exceptions
    "GitError",
    "GitNotFoundError",
    "NoStagedChangesError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    "is_git_repository",
    # Status
    "get_staged_changes",
    "parse_porcelain_status",
    # Diff
    "get_diff_stats",
    "get_staged_diff",
    "parse_shortstat",
    # Branch
    "commit",
    "get_branch",
    "get_commit_subjects",
]
