"""Commit message generation pipeline.

Gathers repository facts once, then runs the deterministic stages in order:
file categorisation, classification, scope resolution, breaking change
detection, description synthesis, history analysis, ticket detection and
suggestion composition. AI augmentation, when enabled, runs only after the
deterministic variants are complete.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from commitgenie.breaking import detect_breaking_changes
from commitgenie.classifier import explain_classification
from commitgenie.config import CommitGenieConfig, get_config
from commitgenie.description import describe, describe_alternative, generate_body, is_large_change
from commitgenie.file_patterns import compile_custom_patterns, count_file_types
from commitgenie.git import GitError, get_branch, get_diff_stats, get_staged_changes, get_staged_diff
from commitgenie.history import HistoryAnalyzer, default_analyzer
from commitgenie.models import (
    ChangeSet,
    ClassificationResult,
    CommitMessageVariant,
    CommitType,
    GroupedFileChanges,
    StatusCounts,
)
from commitgenie.scope import resolve_scope
from commitgenie.suggestions import LABEL_AI, compose, derive_variant
from commitgenie.tickets import detect_ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryFacts:
    """Snapshot of the repository state for one run."""

    change_set: ChangeSet = field(default_factory=ChangeSet)
    diff_text: str = ""
    branch: Optional[str] = None


def collect_facts() -> RepositoryFacts:
    """Read staged changes, diff and branch from git.

    Returns:
        RepositoryFacts for the current repository.

    Raises:
        GitError: If git is unavailable or this is not a repository.
    """
    changes = get_staged_changes()
    stats = get_diff_stats()
    diff_text = get_staged_diff()
    try:
        branch = get_branch()
    except GitError as e:
        logger.debug("Could not read branch name: %s", e)
        branch = None
    return RepositoryFacts(change_set=ChangeSet.build(changes, stats), diff_text=diff_text, branch=branch)


def analyze_changes(facts: RepositoryFacts, config: CommitGenieConfig | None = None) -> ClassificationResult:
    """Classify a change set and synthesise its descriptions.

    Args:
        facts: Repository snapshot.
        config: Resolved configuration.

    Returns:
        ClassificationResult for the staged changes.
    """
    if config is None:
        config = CommitGenieConfig()

    change_set = facts.change_set
    changes = change_set.changes
    file_types = count_file_types(changes, compile_custom_patterns(config.custom_patterns))
    status_counts = StatusCounts.from_changes(changes)

    if changes:
        commit_type, rule = explain_classification(file_types, facts.diff_text, changes)
        logger.debug("Classified as %s by rule %s", commit_type.value, rule)
    else:
        commit_type = CommitType(config.default_type)

    breaking = detect_breaking_changes(facts.diff_text, changes, config)
    description = describe(file_types, status_counts, changes, facts.diff_text)
    large = is_large_change(change_set)

    return ClassificationResult(
        commit_type=commit_type,
        scope=resolve_scope(change_set.paths, config),
        description=description,
        file_changes=GroupedFileChanges.from_changes(changes),
        file_types=file_types,
        is_large_change=large,
        is_breaking_change=breaking.is_breaking,
        breaking_reasons=breaking.reasons,
        alternative_description=describe_alternative(
            file_types, status_counts, changes, facts.diff_text, primary=description
        ),
        body=generate_body(change_set) if large else None,
    )


def _suggest(
    facts: RepositoryFacts,
    config: CommitGenieConfig,
    analyzer: HistoryAnalyzer | None,
) -> tuple[ClassificationResult, list[CommitMessageVariant]]:
    classification = analyze_changes(facts, config)
    profile = (analyzer or default_analyzer).analyze(config.learn_from_history)
    ticket = detect_ticket(facts.branch, config.ticket_linking)
    return classification, compose(classification, profile, ticket, config)


def generate_suggestions(
    facts: RepositoryFacts | None = None,
    config: CommitGenieConfig | None = None,
    analyzer: HistoryAnalyzer | None = None,
) -> list[CommitMessageVariant]:
    """Generate the ordered commit message variants.

    Args:
        facts: Repository snapshot. Defaults to the current git state.
        config: Resolved configuration. Defaults to the discovered config.
        analyzer: History analyzer. Defaults to the process-wide one.

    Returns:
        Variants with the recommended message first.
    """
    if config is None:
        config = get_config()
    if facts is None:
        facts = collect_facts()
    return _suggest(facts, config, analyzer)[1]


def generate_commit_message(
    facts: RepositoryFacts | None = None,
    config: CommitGenieConfig | None = None,
    analyzer: HistoryAnalyzer | None = None,
) -> CommitMessageVariant:
    """Return the recommended commit message variant."""
    return generate_suggestions(facts, config, analyzer)[0]


async def generate_suggestions_with_ai(
    facts: RepositoryFacts | None = None,
    config: CommitGenieConfig | None = None,
    analyzer: HistoryAnalyzer | None = None,
    timeout: Optional[float] = None,
) -> list[CommitMessageVariant]:
    """Generate variants, then try to append an AI-written one.

    The deterministic variants are computed first and returned unchanged
    when AI is disabled, fails, times out or repeats the recommended
    description.

    Args:
        facts: Repository snapshot. Defaults to the current git state.
        config: Resolved configuration. Defaults to the discovered config.
        analyzer: History analyzer. Defaults to the process-wide one.
        timeout: Seconds to wait for the provider; defaults to ai.timeout.

    Returns:
        Variants with the recommended message first.
    """
    from commitgenie.llm import AIRequest, augment_description

    if config is None:
        config = get_config()
    if facts is None:
        facts = collect_facts()

    classification, variants = _suggest(facts, config, analyzer)
    if not config.ai.enabled:
        return variants

    request = AIRequest.from_classification(classification, facts.diff_text)
    description = await augment_description(request, config.ai, timeout)
    if not description:
        return variants

    recommended = variants[0]
    candidate = derive_variant(recommended, len(variants) + 1, LABEL_AI, config, description=description)
    if candidate.description != recommended.description:
        variants.append(candidate)
    return variants
