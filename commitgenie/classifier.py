"""Commit type classification.

The commit type is decided by an ordered cascade of rules. Rules are
evaluated top-down and the first satisfied rule wins, so the position of a
rule in CLASSIFICATION_RULES is its precedence.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable

from commitgenie.diff_utils import DiffLines, extract_symbols, keyword_text, split_changed_lines
from commitgenie.models import CommitType, FileChange, FileStatus, FileTypeCounts

STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".styl", ".pcss")

PERF_PATTERNS = [
    re.compile(r"optimi[sz]"),
    re.compile(r"performance"),
    re.compile(r"\bcach(e|ed|ing)\b"),
    re.compile(r"faster"),
    re.compile(r"\bbatch"),
    re.compile(r"memoi[sz]"),
    re.compile(r"lazy[- ]?load"),
]

FIX_PATTERNS = [
    re.compile(r"\bfix"),
    re.compile(r"\bbug"),
    re.compile(r"\bissue"),
    re.compile(r"\berror"),
    re.compile(r"hotfix"),
    re.compile(r"\bpatch"),
    re.compile(r"[!=]==?\s*(null|undefined)\b"),
    re.compile(r"\?\.[a-z_$]"),
    re.compile(r"\bis (not )?none\b"),
]

REFACTOR_PATTERNS = [
    re.compile(r"refactor"),
    re.compile(r"restructur"),
    re.compile(r"clean[- ]?up"),
    re.compile(r"simplif"),
    re.compile(r"\bextract"),
    re.compile(r"\brenam(e|ed|ing)\b"),
]

CHORE_PATTERNS = [
    re.compile(r"dependencies"),
    re.compile(r"package-lock\.json|yarn\.lock|pnpm-lock|poetry\.lock|cargo\.lock|go\.sum|lockfileversion"),
    re.compile(r"eslint|prettier|stylelint|flake8|ruff|pylint"),
    re.compile(r"\.github/workflows|\.gitlab-ci|\.circleci|jenkinsfile|\.travis"),
]

FEAT_PATTERNS = [
    re.compile(r"add(s|ed|ing)? new"),
    re.compile(r"implement"),
    re.compile(r"introduc"),
    re.compile(r"\benabl(e|es|ed|ing)\b"),
]

# Characters that never carry logic on their own
_FORMATTING_CHARS_RE = re.compile(r"[\s'\"`;]")

# Minimum min/max ratio of added to removed lines for "near-equal churn"
REFACTOR_CHURN_RATIO = 0.3


@dataclass
class ClassificationContext:
    """Inputs of one classification plus lazily derived facts."""

    file_types: FileTypeCounts
    diff_text: str
    file_changes: tuple[FileChange, ...] = field(default_factory=tuple)

    @cached_property
    def lines(self) -> DiffLines:
        return split_changed_lines(self.diff_text)

    @cached_property
    def text(self) -> str:
        return keyword_text(self.diff_text)

    @cached_property
    def full_text(self) -> str:
        return self.diff_text.lower()

    @cached_property
    def all_modified(self) -> bool:
        return bool(self.file_changes) and all(c.status == FileStatus.MODIFIED for c in self.file_changes)

    @cached_property
    def has_added_files(self) -> bool:
        return any(c.status == FileStatus.ADDED for c in self.file_changes)

    @cached_property
    def new_symbols(self) -> list[str]:
        removed = set(extract_symbols(self.lines.removed))
        return [name for name in extract_symbols(self.lines.added) if name not in removed]

    def matches_any(self, patterns: list[re.Pattern], text: str | None = None) -> bool:
        haystack = self.text if text is None else text
        return any(p.search(haystack) for p in patterns)


def _only_tests(ctx: ClassificationContext) -> bool:
    t = ctx.file_types
    return t.test > 0 and t.source == 0 and t.docs == 0


def _only_docs(ctx: ClassificationContext) -> bool:
    t = ctx.file_types
    return t.docs > 0 and t.source == 0 and t.test == 0


def _only_config(ctx: ClassificationContext) -> bool:
    t = ctx.file_types
    return t.config > 0 and t.source == 0 and t.test == 0 and t.docs == 0


def is_formatting_only(lines: DiffLines) -> bool:
    """True when every changed line differs only in whitespace, quotes or semicolons."""
    if not lines.added and not lines.removed:
        return False
    removed = "".join(_FORMATTING_CHARS_RE.sub("", line) for line in lines.removed)
    added = "".join(_FORMATTING_CHARS_RE.sub("", line) for line in lines.added)
    return removed == added


def _style(ctx: ClassificationContext) -> bool:
    if any(c.path.lower().endswith(STYLE_EXTENSIONS) for c in ctx.file_changes):
        return True
    return is_formatting_only(ctx.lines)


def _perf(ctx: ClassificationContext) -> bool:
    return ctx.matches_any(PERF_PATTERNS)


def _fix(ctx: ClassificationContext) -> bool:
    return ctx.matches_any(FIX_PATTERNS)


def _refactor(ctx: ClassificationContext) -> bool:
    if ctx.matches_any(REFACTOR_PATTERNS):
        return True
    return ctx.all_modified and not ctx.new_symbols and ctx.lines.churn_ratio > REFACTOR_CHURN_RATIO


def _chore(ctx: ClassificationContext) -> bool:
    return ctx.matches_any(CHORE_PATTERNS, ctx.full_text)


def _feat(ctx: ClassificationContext) -> bool:
    return ctx.has_added_files or bool(ctx.new_symbols) or ctx.matches_any(FEAT_PATTERNS)


def _fallback(ctx: ClassificationContext) -> CommitType:
    if ctx.file_types.source > 0:
        return CommitType.REFACTOR if ctx.all_modified else CommitType.FEAT
    return CommitType.CHORE


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate and the commit type it yields."""

    name: str
    predicate: Callable[[ClassificationContext], bool]
    outcome: CommitType


CLASSIFICATION_RULES = [
    ClassificationRule("only-tests", _only_tests, CommitType.TEST),
    ClassificationRule("only-docs", _only_docs, CommitType.DOCS),
    ClassificationRule("only-config", _only_config, CommitType.CHORE),
    ClassificationRule("style", _style, CommitType.STYLE),
    ClassificationRule("perf-keywords", _perf, CommitType.PERF),
    ClassificationRule("fix-keywords", _fix, CommitType.FIX),
    ClassificationRule("refactor", _refactor, CommitType.REFACTOR),
    ClassificationRule("tooling-markers", _chore, CommitType.CHORE),
    ClassificationRule("feature", _feat, CommitType.FEAT),
]


def explain_classification(
    file_types: FileTypeCounts,
    diff_text: str,
    file_changes: list[FileChange] | tuple[FileChange, ...],
) -> tuple[CommitType, str]:
    """Classify and report which rule decided.

    Args:
        file_types: Per-category file counts.
        diff_text: Raw staged diff.
        file_changes: Staged file changes.

    Returns:
        Tuple of (commit type, rule name). The rule name is "fallback" when
        no rule in the cascade matched.
    """
    ctx = ClassificationContext(file_types, diff_text, tuple(file_changes))
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(ctx):
            return rule.outcome, rule.name
    return _fallback(ctx), "fallback"


def classify(
    file_types: FileTypeCounts,
    diff_text: str,
    file_changes: list[FileChange] | tuple[FileChange, ...],
) -> CommitType:
    """Return the commit type for a change set."""
    return explain_classification(file_types, diff_text, file_changes)[0]
