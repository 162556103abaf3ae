"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the current git repository
- is_git_repository: Check whether the current directory is inside a repo
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from commitgenie.git.exceptions import GitError, GitNotFoundError

logger = logging.getLogger(__name__)


def _run_git_command(args: list[str], input_text: Optional[str] = None, strip: bool = True) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        input_text: Text written to the command's stdin.
        strip: Strip surrounding whitespace from the output. Porcelain
            output must keep its leading status columns.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("Running git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            input=input_text,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{(e.stderr or '').strip()}")
    except FileNotFoundError:
        raise GitNotFoundError("Git is not installed or not in PATH.")
    return result.stdout.strip() if strip else result.stdout.rstrip("\n")


def get_repo_root() -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"])
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")


def is_git_repository() -> bool:
    """Return True when the current directory is inside a git repository."""
    try:
        _run_git_command(["rev-parse", "--git-dir"])
        return True
    except GitError:
        return False
