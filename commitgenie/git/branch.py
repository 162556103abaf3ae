"""Git branch and commit utilities.

Contains:
- get_branch: Get the current branch name
- get_commit_subjects: Get the last n commit subjects
- commit: Create a commit from the staged changes
"""

from typing import Optional

from commitgenie.git.exceptions import GitError, NoStagedChangesError
from commitgenie.git.runner import _run_git_command


def get_branch() -> Optional[str]:
    """Get the current branch name.

    Returns:
        The current branch name, or None in detached HEAD state.
    """
    branch = _run_git_command(["branch", "--show-current"])
    return branch or None


def get_commit_subjects(n: int = 50) -> list[str]:
    """Get the last n commit subjects.

    Args:
        n: Number of commits to retrieve.

    Returns:
        List of commit subject lines, most recent first.
    """
    try:
        output = _run_git_command(["log", f"-n{n}", "--pretty=%s"])
        if not output:
            return []
        return output.split("\n")
    except GitError:
        # No commits yet in the repo
        return []


def commit(message: str) -> None:
    """Commit the staged changes with the given message.

    The message is passed on stdin so it is never interpreted by a shell.

    Args:
        message: Full commit message.

    Raises:
        NoStagedChangesError: If nothing is staged.
        GitError: If the commit fails.
    """
    if not _run_git_command(["diff", "--cached", "--name-only"]):
        raise NoStagedChangesError("No staged changes to commit. Stage files with `git add` first.")
    _run_git_command(["commit", "-F", "-"], input_text=message)
