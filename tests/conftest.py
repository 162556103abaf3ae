"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from commitgenie.config import CommitGenieConfig, HistoryConfig, clear_config_cache
from commitgenie.engine import RepositoryFacts
from commitgenie.history import HistoryAnalyzer, clear_history_cache
from commitgenie.models import ChangeSet, DiffStats, FileChange


@pytest.fixture(autouse=True)
def reset_process_caches():
    """Clear process-wide config and history caches around each test."""
    clear_config_cache()
    clear_history_cache()
    yield
    clear_config_cache()
    clear_history_cache()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def no_history():
    """History analyzer that sees an empty repository."""
    return HistoryAnalyzer(commit_source=lambda n: [])


@pytest.fixture
def plain_config():
    """Configuration with emojis off and history learning disabled."""
    return CommitGenieConfig(include_emoji=False, learn_from_history=HistoryConfig(enabled=False))


@pytest.fixture
def make_facts():
    """Factory building RepositoryFacts from (status, path) pairs."""

    def _make(*changes, diff_text="", branch=None, insertions=0, deletions=0) -> RepositoryFacts:
        file_changes = [FileChange(status=status, path=path) for status, path in changes]
        stats = DiffStats(files_changed=len(file_changes), insertions=insertions, deletions=deletions)
        return RepositoryFacts(change_set=ChangeSet.build(file_changes, stats), diff_text=diff_text, branch=branch)

    return _make


@pytest.fixture
def sample_diff():
    """A small two-file staged diff."""
    return """diff --git a/src/users.py b/src/users.py
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/src/users.py
@@ -0,0 +1,4 @@
+def create_user(name):
+    return {"name": name}
+
+def delete_user(user_id):
diff --git a/src/app.py b/src/app.py
index 1234567..abcdefg 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@
 import os
+from src.users import create_user
"""
