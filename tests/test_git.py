"""Tests for commitgenie.git package."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from commitgenie.git import (
    GitError,
    GitNotFoundError,
    NoStagedChangesError,
    _run_git_command,
    commit,
    get_branch,
    get_commit_subjects,
    get_diff_stats,
    get_repo_root,
    get_staged_changes,
    is_git_repository,
    parse_porcelain_status,
    parse_shortstat,
)
from commitgenie.models import DiffStats, FileChange, FileStatus


def _completed(stdout: str) -> MagicMock:
    result = MagicMock()
    result.stdout = stdout
    result.returncode = 0
    return result


class TestRunGitCommand:
    """Tests for _run_git_command function."""

    def test_successful_command(self, mocker):
        """Test successful git command execution."""
        mocker.patch("subprocess.run", return_value=_completed("output\n"))

        assert _run_git_command(["status"]) == "output"

    def test_unstripped_output_keeps_leading_columns(self, mocker):
        """Test strip=False only drops trailing newlines."""
        mocker.patch("subprocess.run", return_value=_completed(" M src/a.ts\n"))

        assert _run_git_command(["status"], strip=False) == " M src/a.ts"

    def test_input_passed_on_stdin(self, mocker):
        """Test input_text is forwarded to subprocess.run."""
        mock_run = mocker.patch("subprocess.run", return_value=_completed(""))

        _run_git_command(["commit", "-F", "-"], input_text="feat: x")

        assert mock_run.call_args.args[0] == ["git", "commit", "-F", "-"]
        assert mock_run.call_args.kwargs["input"] == "feat: x"

    def test_failed_command_raises_error(self, mocker):
        """Test that failed command raises GitError."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", stderr="error"),
        )

        with pytest.raises(GitError) as exc_info:
            _run_git_command(["invalid"])

        assert "Git command failed" in str(exc_info.value)

    def test_git_not_found_raises_error(self, mocker):
        """Test that missing git raises GitNotFoundError."""
        mocker.patch("subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitNotFoundError) as exc_info:
            _run_git_command(["status"])

        assert "not installed" in str(exc_info.value)


class TestRepository:
    """Tests for repository helpers."""

    def test_repo_root(self, mocker):
        """Test that repo root path is returned."""
        mocker.patch("subprocess.run", return_value=_completed("/path/to/repo\n"))

        assert get_repo_root() == Path("/path/to/repo")

    def test_repo_root_outside_repo(self, mocker):
        """Test error if not in a git repository."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(128, "git", stderr="not a git repo"),
        )

        with pytest.raises(GitError) as exc_info:
            get_repo_root()

        assert "Not in a git repository" in str(exc_info.value)

    def test_is_git_repository(self, mocker):
        """Test repository detection."""
        mocker.patch("subprocess.run", return_value=_completed(".git\n"))
        assert is_git_repository() is True

        mocker.patch("subprocess.run", side_effect=subprocess.CalledProcessError(128, "git"))
        assert is_git_repository() is False


class TestParsePorcelainStatus:
    """Tests for parse_porcelain_status function."""

    def test_staged_statuses(self):
        """Test each staged status letter is mapped."""
        output = "A  src/new.ts\nM  src/app.ts\nD  src/old.ts\nR  src/a.ts -> src/b.ts\nC  src/c.ts -> src/d.ts"

        assert parse_porcelain_status(output) == [
            FileChange(FileStatus.ADDED, "src/new.ts"),
            FileChange(FileStatus.MODIFIED, "src/app.ts"),
            FileChange(FileStatus.DELETED, "src/old.ts"),
            FileChange(FileStatus.RENAMED, "src/b.ts"),
            FileChange(FileStatus.ADDED, "src/d.ts"),
        ]

    def test_unstaged_and_untracked_skipped(self):
        """Test worktree-only, untracked and ignored entries are skipped."""
        output = " M src/dirty.ts\n?? notes.txt\n!! build/\nMM src/both.ts"

        assert parse_porcelain_status(output) == [FileChange(FileStatus.MODIFIED, "src/both.ts")]

    def test_branch_header_and_blank_lines(self):
        """Test branch headers and short lines are ignored."""
        output = "## main...origin/main\n\nA  a.py\n"

        assert parse_porcelain_status(output) == [FileChange(FileStatus.ADDED, "a.py")]

    def test_quoted_path(self):
        """Test quoted paths are unquoted."""
        assert parse_porcelain_status('A  "docs/my file.md"') == [FileChange(FileStatus.ADDED, "docs/my file.md")]

    def test_unknown_letter(self):
        """Test unmerged letters map to unknown."""
        assert parse_porcelain_status("U  conflict.ts")[0].status == FileStatus.UNKNOWN

    def test_get_staged_changes(self, mocker):
        """Test staged changes are read from porcelain status."""
        mock_run = mocker.patch(
            "commitgenie.git.status._run_git_command", return_value="A  src/new.ts\n M src/wip.ts"
        )

        assert get_staged_changes() == [FileChange(FileStatus.ADDED, "src/new.ts")]
        mock_run.assert_called_once_with(["status", "--porcelain=v1"], strip=False)


class TestShortstat:
    """Tests for diff statistics."""

    def test_full_summary(self):
        """Test all three counts are parsed."""
        stats = parse_shortstat(" 3 files changed, 10 insertions(+), 2 deletions(-)")
        assert stats == DiffStats(files_changed=3, insertions=10, deletions=2)

    def test_singular_and_missing(self):
        """Test singular forms and absent counts."""
        assert parse_shortstat(" 1 file changed, 1 insertion(+)") == DiffStats(1, 1, 0)
        assert parse_shortstat(" 1 file changed, 4 deletions(-)") == DiffStats(1, 0, 4)

    def test_empty(self):
        """Test empty output yields zero stats."""
        assert parse_shortstat("") == DiffStats()

    def test_get_diff_stats(self, mocker):
        """Test stats come from the cached shortstat."""
        mock_run = mocker.patch(
            "commitgenie.git.diff._run_git_command", return_value="2 files changed, 5 insertions(+)"
        )

        assert get_diff_stats().changed_lines == 5
        mock_run.assert_called_once_with(["diff", "--cached", "--shortstat"])


class TestBranch:
    """Tests for branch and history helpers."""

    def test_get_branch(self, mocker):
        """Test the current branch name is returned."""
        mocker.patch("commitgenie.git.branch._run_git_command", return_value="feature/ABC-123-login")

        assert get_branch() == "feature/ABC-123-login"

    def test_detached_head(self, mocker):
        """Test detached HEAD yields None."""
        mocker.patch("commitgenie.git.branch._run_git_command", return_value="")

        assert get_branch() is None

    def test_commit_subjects(self, mocker):
        """Test commit subjects are split by line."""
        mock_run = mocker.patch(
            "commitgenie.git.branch._run_git_command", return_value="feat: add x\nfix: handle y"
        )

        assert get_commit_subjects(2) == ["feat: add x", "fix: handle y"]
        mock_run.assert_called_once_with(["log", "-n2", "--pretty=%s"])

    def test_commit_subjects_without_commits(self, mocker):
        """Test an empty repository yields no subjects."""
        mocker.patch("commitgenie.git.branch._run_git_command", side_effect=GitError("no commits"))

        assert get_commit_subjects() == []


class TestCommit:
    """Tests for commit function."""

    def test_commit_uses_stdin(self, mocker):
        """Test the message is passed on stdin."""
        mock_run = mocker.patch("commitgenie.git.branch._run_git_command", side_effect=["src/a.ts", ""])

        commit("feat: add x\n\nRefs: ABC-1")

        mock_run.assert_called_with(["commit", "-F", "-"], input_text="feat: add x\n\nRefs: ABC-1")

    def test_nothing_staged(self, mocker):
        """Test committing without staged changes raises."""
        mocker.patch("commitgenie.git.branch._run_git_command", return_value="")

        with pytest.raises(NoStagedChangesError):
            commit("feat: add x")

    def test_commit_failure(self, mocker):
        """Test git failures propagate."""
        mocker.patch(
            "commitgenie.git.branch._run_git_command",
            side_effect=["src/a.ts", GitError("hook failed")],
        )

        with pytest.raises(GitError):
            commit("feat: add x")
