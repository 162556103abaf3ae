"""Tests for commitgenie.engine module."""

import asyncio
from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from commitgenie.config import AIConfig, CommitGenieConfig, HistoryConfig, ScopeMapping
from commitgenie.engine import (
    RepositoryFacts,
    analyze_changes,
    collect_facts,
    generate_commit_message,
    generate_suggestions,
    generate_suggestions_with_ai,
)
from commitgenie.git import GitError
from commitgenie.models import ChangeSet, CommitType, DiffStats, FileChange, FileStatus

A = FileStatus.ADDED
M = FileStatus.MODIFIED


@pytest.fixture
def api_config(plain_config):
    return replace(plain_config, scopes=[ScopeMapping(pattern="src/api", scope="api")])


class TestAnalyzeChanges:
    """Tests for analyze_changes."""

    def test_new_api_file(self, make_facts, api_config):
        """Test a new file under a mapped directory."""
        result = analyze_changes(make_facts((A, "src/api/users.ts")), api_config)

        assert result.commit_type == CommitType.FEAT
        assert result.scope == "api"
        assert result.description == "add users.ts"
        assert result.alternative_description == "add users module"
        assert result.file_changes.added == ("src/api/users.ts",)
        assert result.is_large_change is False
        assert result.body is None

    def test_readme_update(self, make_facts, plain_config):
        """Test a documentation-only change."""
        result = analyze_changes(make_facts((M, "README.md")), plain_config)

        assert result.commit_type == CommitType.DOCS
        assert result.scope is None
        assert result.description == "update README.md"

    def test_large_change_gets_body(self, make_facts, plain_config):
        """Test three files make a large change with a body."""
        result = analyze_changes(make_facts((A, "src/a.py"), (A, "src/b.py"), (A, "src/c.py")), plain_config)

        assert result.is_large_change is True
        assert result.description == "add 3 files"
        assert result.body == "Added:\n- src/a.py\n- src/b.py\n- src/c.py"

    def test_line_count_makes_large_change(self, make_facts, plain_config):
        """Test 100 changed lines make a large change."""
        result = analyze_changes(make_facts((M, "src/app.py"), insertions=60, deletions=40), plain_config)

        assert result.is_large_change is True
        assert result.body == "Modified:\n- src/app.py"

    def test_empty_change_set_uses_default_type(self, make_facts):
        """Test the configured default type applies when nothing is staged."""
        result = analyze_changes(make_facts(), CommitGenieConfig(default_type="chore"))

        assert result.commit_type == CommitType.CHORE
        assert result.is_breaking_change is False

    def test_removed_export_is_breaking(self, make_facts, plain_config):
        """Test a removed exported function is reported as breaking."""
        result = analyze_changes(make_facts((M, "src/api.ts"), diff_text="-export function oldApi()"), plain_config)

        assert result.commit_type == CommitType.REFACTOR
        assert result.is_breaking_change is True
        assert result.breaking_reasons == (
            "Removed exported function 'oldApi'",
            "Removed function 'oldApi'",
        )


class TestGenerateSuggestions:
    """End-to-end tests for generate_suggestions."""

    def test_new_api_file(self, make_facts, api_config, no_history):
        """Test the recommended message for a new API file."""
        variants = generate_suggestions(make_facts((A, "src/api/users.ts")), api_config, no_history)

        assert variants[0].full == "feat(api): add users.ts"
        assert [v.label for v in variants] == ["Recommended", "No Scope", "Alternative Description"]

    def test_emoji_from_default_profile(self, make_facts, no_history):
        """Test emojis are used when history is empty and includeEmoji is unset."""
        config = CommitGenieConfig(scopes=[ScopeMapping(pattern="src/api", scope="api")])
        variants = generate_suggestions(make_facts((A, "src/api/users.ts")), config, no_history)

        assert variants[0].full == "✨ feat(api): add users.ts"

    def test_readme(self, make_facts, plain_config, no_history):
        """Test a README update yields a docs message."""
        message = generate_commit_message(make_facts((M, "README.md")), plain_config, no_history)

        assert message.full == "docs: update README.md"
        assert message.id == 1

    def test_ticket_from_branch(self, make_facts, plain_config, no_history):
        """Test every variant except Without Ticket references the branch ticket."""
        facts = make_facts((A, "src/auth/login.ts"), branch="feature/ABC-123-add-login")
        variants = generate_suggestions(facts, plain_config, no_history)

        for variant in variants:
            if variant.label == "Without Ticket":
                assert "ABC-123" not in variant.full
            else:
                assert variant.full.endswith("Refs: ABC-123")
        assert "Without Ticket" in [v.label for v in variants]

    def test_breaking_change(self, make_facts, plain_config, no_history):
        """Test the breaking marker and footer on the first variant."""
        facts = make_facts((M, "src/api.ts"), diff_text="-export function oldApi()")
        variants = generate_suggestions(facts, plain_config, no_history)

        assert variants[0].label == "Breaking Change"
        assert variants[0].full == (
            "refactor!: update api.ts\n\n"
            "BREAKING CHANGE: Removed exported function 'oldApi'\n"
            "  - Removed function 'oldApi'"
        )
        assert variants[-1].label == "Without Breaking Flag"
        assert variants[-1].full.startswith("refactor: update api.ts")

    def test_history_supplies_scope(self, make_facts):
        """Test a learned scope is used when no rule resolves one."""
        from commitgenie.history import HistoryAnalyzer

        analyzer = HistoryAnalyzer(commit_source=lambda n: ["feat(login): add form", "fix(login): handle blank"])
        config = CommitGenieConfig(include_emoji=False)
        variants = generate_suggestions(make_facts((A, "src/auth/login.ts")), config, analyzer)

        assert variants[0].full == "feat(login): add login.ts"

    def test_defaults_read_git(self, mocker, plain_config):
        """Test facts and config default to the repository state."""
        facts = RepositoryFacts(change_set=ChangeSet.build([FileChange(M, "README.md")]))
        mocker.patch("commitgenie.engine.collect_facts", return_value=facts)
        mocker.patch("commitgenie.engine.get_config", return_value=plain_config)

        assert generate_suggestions()[0].full == "docs: update README.md"


class TestCollectFacts:
    """Tests for collect_facts."""

    def test_reads_git(self, mocker):
        """Test staged changes, stats, diff and branch are gathered."""
        mocker.patch("commitgenie.engine.get_staged_changes", return_value=[FileChange(A, "src/a.py")])
        mocker.patch("commitgenie.engine.get_diff_stats", return_value=DiffStats(1, 3, 0))
        mocker.patch("commitgenie.engine.get_staged_diff", return_value="+x")
        mocker.patch("commitgenie.engine.get_branch", return_value="main")

        facts = collect_facts()

        assert facts.change_set.paths == ["src/a.py"]
        assert facts.change_set.stats.insertions == 3
        assert facts.diff_text == "+x"
        assert facts.branch == "main"

    def test_branch_failure_tolerated(self, mocker):
        """Test an unreadable branch becomes None."""
        mocker.patch("commitgenie.engine.get_staged_changes", return_value=[])
        mocker.patch("commitgenie.engine.get_diff_stats", return_value=DiffStats())
        mocker.patch("commitgenie.engine.get_staged_diff", return_value="")
        mocker.patch("commitgenie.engine.get_branch", side_effect=GitError("no HEAD"))

        assert collect_facts().branch is None

    def test_status_failure_propagates(self, mocker):
        """Test git failures reading the status propagate."""
        mocker.patch("commitgenie.engine.get_staged_changes", side_effect=GitError("not a repo"))

        with pytest.raises(GitError):
            collect_facts()


class TestAISuggestions:
    """Tests for generate_suggestions_with_ai."""

    @pytest.fixture
    def ai_config(self, api_config):
        return replace(api_config, ai=AIConfig(enabled=True, api_key="test-key"))

    def test_appends_ai_variant(self, make_facts, ai_config, no_history, mocker):
        """Test the AI description becomes the last variant."""
        mocker.patch("commitgenie.llm.augment_description", new=AsyncMock(return_value="add user listing endpoint"))

        variants = asyncio.run(generate_suggestions_with_ai(make_facts((A, "src/api/users.ts")), ai_config, no_history))

        assert len(variants) == 4
        assert variants[-1].id == 4
        assert variants[-1].label == "AI Suggested"
        assert variants[-1].full == "feat(api): add user listing endpoint"
        assert variants[0].full == "feat(api): add users.ts"

    def test_ai_failure_keeps_rules(self, make_facts, ai_config, no_history, mocker):
        """Test a failed AI call leaves the rule-based variants unchanged."""
        mocker.patch("commitgenie.llm.augment_description", new=AsyncMock(return_value=None))
        facts = make_facts((A, "src/api/users.ts"))

        variants = asyncio.run(generate_suggestions_with_ai(facts, ai_config, no_history))

        assert [v.full for v in variants] == [v.full for v in generate_suggestions(facts, ai_config, no_history)]

    def test_duplicate_ai_description_dropped(self, make_facts, ai_config, no_history, mocker):
        """Test an AI description equal to the recommended one is not appended."""
        mocker.patch("commitgenie.llm.augment_description", new=AsyncMock(return_value="add users.ts"))

        variants = asyncio.run(generate_suggestions_with_ai(make_facts((A, "src/api/users.ts")), ai_config, no_history))

        assert "AI Suggested" not in [v.label for v in variants]

    def test_disabled_skips_provider(self, make_facts, api_config, no_history, mocker):
        """Test no provider is called when AI is disabled."""
        mock_augment = mocker.patch("commitgenie.llm.augment_description", new=AsyncMock())

        variants = asyncio.run(generate_suggestions_with_ai(make_facts((A, "src/api/users.ts")), api_config, no_history))

        mock_augment.assert_not_called()
        assert len(variants) == 3
