"""Commit history analysis.

Learns project style defaults (emoji usage, Conventional Commits adherence,
common scopes and verbs) from recent commit subjects. Profiles are cached
for a fixed time-to-live; the cache can be cleared explicitly.
"""

import logging
import re
import threading
import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Optional

from commitgenie.config import HistoryConfig
from commitgenie.models import HistoryProfile

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60.0

EMOJI_THRESHOLD = 0.3
CONVENTIONAL_THRESHOLD = 0.5
TOP_N = 10

DEFAULT_VERBS = ("add", "update", "fix", "remove", "refactor")

EMOJI_PATTERN = re.compile(r"^(?:[\U0001F300-\U0001FAFF]|[\u2600-\u26FF]|[\u2700-\u27BF]|:[\w+-]+:)")
CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(feat|fix|docs|style|refactor|test|chore|perf|ci|build|revert)(\([^)]+\))?!?:",
    re.IGNORECASE,
)
# Emoji variation selectors and joiners trailing the matched emoji
_EMOJI_TAIL_RE = re.compile(r"^[\uFE0F\u200D]+")
_VERB_RE = re.compile(r"^[a-z]+$")


def default_profile() -> HistoryProfile:
    """Profile used when history learning is disabled or no history exists."""
    return HistoryProfile(
        uses_emojis=True,
        uses_conventional_commits=True,
        common_scopes=(),
        common_verbs=DEFAULT_VERBS,
        average_length=50,
        emoji_frequency={},
        type_frequency={},
    )


def _strip_emoji(subject: str) -> tuple[Optional[str], str]:
    match = EMOJI_PATTERN.match(subject)
    if not match:
        return None, subject
    rest = _EMOJI_TAIL_RE.sub("", subject[match.end():])
    return match.group(0), rest.strip()


def _top(counter: Counter) -> tuple[str, ...]:
    # Counter.most_common keeps first-seen order among equal counts
    return tuple(name for name, _ in counter.most_common(TOP_N))


def build_profile(subjects: list[str]) -> HistoryProfile:
    """Compute a HistoryProfile from commit subjects.

    Args:
        subjects: Commit subject lines, most recent first.

    Returns:
        The computed profile, or the default profile for an empty list.
    """
    if not subjects:
        return default_profile()

    emoji_count = 0
    conventional_count = 0
    total_length = 0
    scope_count: Counter[str] = Counter()
    verb_count: Counter[str] = Counter()
    emoji_frequency: Counter[str] = Counter()
    type_frequency: Counter[str] = Counter()

    for subject in subjects:
        total_length += len(subject)

        emoji, rest = _strip_emoji(subject)
        if emoji:
            emoji_count += 1
            emoji_frequency[emoji] += 1

        conventional = CONVENTIONAL_COMMIT_PATTERN.match(rest)
        if conventional:
            conventional_count += 1
            type_frequency[conventional.group(1).lower()] += 1
            if conventional.group(2):
                scope = conventional.group(2).strip("()").strip()
                if scope:
                    scope_count[scope] += 1
            rest = rest[conventional.end():].strip()

        words = rest.split()
        first_word = words[0].lower() if words else ""
        if len(first_word) > 2 and _VERB_RE.match(first_word):
            verb_count[first_word] += 1

    total = len(subjects)
    return HistoryProfile(
        uses_emojis=emoji_count > total * EMOJI_THRESHOLD,
        uses_conventional_commits=conventional_count > total * CONVENTIONAL_THRESHOLD,
        common_scopes=_top(scope_count),
        common_verbs=_top(verb_count),
        average_length=round(total_length / total),
        emoji_frequency=dict(emoji_frequency),
        type_frequency=dict(type_frequency),
    )


@dataclass(frozen=True)
class CacheEntry:
    """A cached profile and the time it was computed."""

    value: HistoryProfile
    timestamp: float

    def is_valid(self, now: float, ttl: float = CACHE_TTL_SECONDS) -> bool:
        return 0 <= now - self.timestamp < ttl


def _git_commit_subjects(count: int) -> list[str]:
    from commitgenie.git import get_commit_subjects

    return get_commit_subjects(count)


class HistoryAnalyzer:
    """Builds and caches history profiles.

    Cache writes are serialised with a lock, so one analyzer can be shared by
    concurrent callers; independent callers may also create their own.
    """

    def __init__(
        self,
        commit_source: Callable[[int], list[str]] | None = None,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.commit_source = commit_source or _git_commit_subjects
        self.ttl = ttl
        self.clock = clock
        self._cache: Optional[CacheEntry] = None
        self._lock = threading.Lock()

    def analyze(self, config: HistoryConfig | None = None, commit_count: Optional[int] = None) -> HistoryProfile:
        """Return the history profile, computing it on a cache miss.

        Args:
            config: History learning configuration.
            commit_count: Number of subjects to sample; defaults to
                config.commit_count.

        Returns:
            The cached profile, a freshly computed one, or the default.
        """
        if config is None:
            config = HistoryConfig()

        if not config.enabled:
            return default_profile()

        with self._lock:
            now = self.clock()
            if self._cache is not None and self._cache.is_valid(now, self.ttl):
                logger.debug("Using cached history profile")
                return self._cache.value

            count = commit_count or config.commit_count
            subjects = [s for s in self.commit_source(count) if s.strip()][:count]
            if not subjects:
                logger.debug("No commit history found, using default profile")
                return default_profile()

            profile = build_profile(subjects)
            self._cache = CacheEntry(value=profile, timestamp=now)
            logger.debug("Analyzed %d commit subjects", len(subjects))
            return profile

    def clear_cache(self) -> None:
        """Forget the cached profile."""
        with self._lock:
            self._cache = None

    def uses_emojis(self, config: HistoryConfig | None = None) -> bool:
        return self.analyze(config).uses_emojis

    def most_common_type(self, config: HistoryConfig | None = None) -> Optional[str]:
        """Most frequent Conventional Commit type in history, or None."""
        frequency = self.analyze(config).type_frequency
        if not frequency:
            return None
        return Counter(frequency).most_common(1)[0][0]

    def suggest_scope(self, paths: list[str], config: HistoryConfig | None = None) -> Optional[str]:
        """Return the most frequent historical scope that appears in a path.

        Args:
            paths: Changed file paths.
            config: History learning configuration.

        Returns:
            A scope whose name is a case-insensitive substring of any path.
        """
        return suggest_scope_from_profile(self.analyze(config), paths)


def suggest_scope_from_profile(profile: HistoryProfile, paths: list[str]) -> Optional[str]:
    """Pick the first common scope (by frequency) contained in any path."""
    lowered = [p.lower() for p in paths]
    for scope in profile.common_scopes:
        needle = scope.lower()
        if any(needle in path for path in lowered):
            return scope
    return None


# Process-wide analyzer
default_analyzer = HistoryAnalyzer()


def clear_history_cache() -> None:
    """Clear the process-wide history cache."""
    default_analyzer.clear_cache()
