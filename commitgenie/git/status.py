"""Git status utilities.

Contains:
- parse_porcelain_status: Parse `git status --porcelain` into staged FileChanges
- get_staged_changes: Get the staged FileChanges of the current repository
"""

from commitgenie.git.runner import _run_git_command
from commitgenie.models import FileChange, FileStatus


def parse_porcelain_status(output: str) -> list[FileChange]:
    """Parse porcelain v1 status output into staged file changes.

    The porcelain format uses two columns:
    - First column: staged status (index)
    - Second column: worktree status

    Only lines whose first column indicates a staged change are kept. For
    renames and copies ("old -> new") the new path is used.

    Args:
        output: Raw `git status --porcelain=v1` output.

    Returns:
        Staged file changes in status order.
    """
    changes = []
    for line in output.split("\n"):
        if len(line) < 4 or line.startswith("##"):
            continue
        index_status = line[0]
        if index_status in (" ", "?", "!"):
            continue
        path = line[3:].strip()
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        path = path.strip('"')
        changes.append(FileChange(status=FileStatus.from_code(index_status), path=path))
    return changes


def get_staged_changes() -> list[FileChange]:
    """Get the staged file changes.

    Returns:
        List of staged FileChange objects.

    Raises:
        GitError: If git status fails.
    """
    output = _run_git_command(["status", "--porcelain=v1"], strip=False)
    return parse_porcelain_status(output)
