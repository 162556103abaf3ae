"""Configuration loading for commitgenie.

Handles discovery and parsing of the repository config file and the merge of
user values over the built-in defaults. Every field has its own fallback rule,
so a malformed value only resets that field.

Config files searched, in order, in the git root and then the current
directory:
- .commitgenierc.json
- .commitgenierc
- commitgenie.config.json
- .commitgenie.yaml
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a config file cannot be read or parsed."""

    pass


CONFIG_FILES = [
    ".commitgenierc.json",
    ".commitgenierc",
    "commitgenie.config.json",
    ".commitgenie.yaml",
]

# Written by `commitgenie config init`
DEFAULT_CONFIG_FILE = CONFIG_FILES[0]

COMMIT_TYPES = ["feat", "fix", "docs", "style", "refactor", "test", "chore", "perf"]
FILE_CATEGORIES = ["test", "docs", "config", "source"]
AI_PROVIDERS = ["openai", "anthropic", "google"]

DEFAULT_BREAKING_KEYWORDS = [
    "breaking change",
    "breaking",
    "removed",
    "deprecated",
    "incompatible",
    "no longer supported",
]

DEFAULT_AI_TIMEOUT = 10.0


@dataclass
class ScopeMapping:
    """Maps changed paths containing `pattern` to `scope`."""

    pattern: str
    scope: str


@dataclass
class CustomPattern:
    """User-defined file category rule, evaluated before the built-in table."""

    pattern: str
    type: str  # test | docs | config | source


@dataclass
class TicketLinkingConfig:
    """Configuration for ticket detection from branch names."""

    enabled: bool = True
    patterns: list[str] = field(default_factory=list)
    prefix: str = "Refs:"


@dataclass
class HistoryConfig:
    """Configuration for learning style defaults from commit history."""

    enabled: bool = True
    commit_count: int = 50


@dataclass
class BreakingChangeConfig:
    """Configuration for breaking change detection."""

    enabled: bool = True
    keywords: list[str] = field(default_factory=lambda: DEFAULT_BREAKING_KEYWORDS.copy())
    include_footer: bool = True


@dataclass
class TemplatesConfig:
    """Custom message templates. None means the built-in layout."""

    default: Optional[str] = None
    no_scope: Optional[str] = None
    with_body: Optional[str] = None


@dataclass
class AIConfig:
    """Configuration for optional AI-augmented descriptions."""

    enabled: bool = False
    provider: str = "openai"
    api_key: Optional[str] = None
    model: Optional[str] = None
    timeout: float = DEFAULT_AI_TIMEOUT


@dataclass
class CommitGenieConfig:
    """Fully resolved configuration."""

    scopes: list[ScopeMapping] = field(default_factory=list)
    default_type: str = "feat"
    include_emoji: Optional[bool] = None  # None lets history decide
    max_message_length: int = 72
    custom_patterns: list[CustomPattern] = field(default_factory=list)
    ticket_linking: TicketLinkingConfig = field(default_factory=TicketLinkingConfig)
    learn_from_history: HistoryConfig = field(default_factory=HistoryConfig)
    breaking_change_detection: BreakingChangeConfig = field(default_factory=BreakingChangeConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    ai: AIConfig = field(default_factory=AIConfig)


# ============================================================
# Field helpers
# ============================================================


def _lookup(section: dict, *keys: str) -> Any:
    """Return the first present key among camelCase/snake_case spellings."""
    for key in keys:
        if key in section:
            return section[key]
    return None


def _as_bool(value: Any, default: Optional[bool], name: str) -> Optional[bool]:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    logger.warning("Ignoring config field %s: expected a boolean, got %r", name, value)
    return default


def _as_int(value: Any, default: int, name: str, minimum: int = 1) -> int:
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool) and value >= minimum:
        return value
    logger.warning("Ignoring config field %s: expected an integer >= %d, got %r", name, minimum, value)
    return default


def _as_float(value: Any, default: float, name: str) -> float:
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    logger.warning("Ignoring config field %s: expected a positive number, got %r", name, value)
    return default


def _as_str(value: Any, default: Optional[str], name: str) -> Optional[str]:
    if value is None:
        return default
    if isinstance(value, str) and value.strip():
        return value
    logger.warning("Ignoring config field %s: expected a non-empty string, got %r", name, value)
    return default


def _as_choice(value: Any, default: str, choices: list[str], name: str) -> str:
    if value is None:
        return default
    if isinstance(value, str) and value.lower() in choices:
        return value.lower()
    logger.warning("Ignoring config field %s: %r is not one of %s", name, value, ", ".join(choices))
    return default


def _as_str_list(value: Any, default: list[str], name: str) -> list[str]:
    if value is None:
        return default
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    logger.warning("Ignoring config field %s: expected a list of strings, got %r", name, value)
    return default


def _as_section(value: Any, name: str) -> dict:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    logger.warning("Ignoring config section %s: expected a mapping, got %r", name, value)
    return {}


def _load_scopes(value: Any) -> list[ScopeMapping]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring config field scopes: expected a list, got %r", value)
        return []
    scopes = []
    for item in value:
        if isinstance(item, dict) and isinstance(item.get("pattern"), str) and isinstance(item.get("scope"), str):
            if item["pattern"] and item["scope"].strip():
                scopes.append(ScopeMapping(pattern=item["pattern"], scope=item["scope"].strip()))
                continue
        logger.warning("Ignoring invalid scope mapping: %r", item)
    return scopes


def _load_custom_patterns(value: Any) -> list[CustomPattern]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring config field customPatterns: expected a list, got %r", value)
        return []
    patterns = []
    for item in value:
        if (
            isinstance(item, dict)
            and isinstance(item.get("pattern"), str)
            and item.get("type") in FILE_CATEGORIES
        ):
            patterns.append(CustomPattern(pattern=item["pattern"], type=item["type"]))
            continue
        logger.warning("Ignoring invalid custom pattern: %r", item)
    return patterns


# ============================================================
# Merge and serialisation
# ============================================================


def load_config_from_dict(config_dict: dict) -> CommitGenieConfig:
    """Merge a user configuration dictionary over the defaults.

    Keys may be spelled in camelCase (rc-file style) or snake_case. Each
    field falls back to its default independently when missing or invalid.

    Args:
        config_dict: Parsed user configuration.

    Returns:
        CommitGenieConfig instance.
    """
    defaults = CommitGenieConfig()
    if not isinstance(config_dict, dict):
        logger.warning("Ignoring configuration: expected a mapping, got %r", type(config_dict).__name__)
        return defaults

    ticket_section = _as_section(_lookup(config_dict, "ticketLinking", "ticket_linking"), "ticketLinking")
    history_section = _as_section(_lookup(config_dict, "learnFromHistory", "learn_from_history"), "learnFromHistory")
    breaking_section = _as_section(
        _lookup(config_dict, "breakingChangeDetection", "breaking_change_detection"), "breakingChangeDetection"
    )
    templates_section = _as_section(config_dict.get("templates"), "templates")
    ai_section = _as_section(config_dict.get("ai"), "ai")

    ticket_defaults = defaults.ticket_linking
    history_defaults = defaults.learn_from_history
    breaking_defaults = defaults.breaking_change_detection
    ai_defaults = defaults.ai

    return CommitGenieConfig(
        scopes=_load_scopes(config_dict.get("scopes")),
        default_type=_as_choice(
            _lookup(config_dict, "defaultType", "default_type"), defaults.default_type, COMMIT_TYPES, "defaultType"
        ),
        include_emoji=_as_bool(
            _lookup(config_dict, "includeEmoji", "include_emoji"), defaults.include_emoji, "includeEmoji"
        ),
        max_message_length=_as_int(
            _lookup(config_dict, "maxMessageLength", "max_message_length"),
            defaults.max_message_length,
            "maxMessageLength",
            minimum=20,
        ),
        custom_patterns=_load_custom_patterns(_lookup(config_dict, "customPatterns", "custom_patterns")),
        ticket_linking=TicketLinkingConfig(
            enabled=_as_bool(ticket_section.get("enabled"), ticket_defaults.enabled, "ticketLinking.enabled"),
            patterns=_as_str_list(ticket_section.get("patterns"), ticket_defaults.patterns, "ticketLinking.patterns"),
            prefix=_as_str(ticket_section.get("prefix"), ticket_defaults.prefix, "ticketLinking.prefix"),
        ),
        learn_from_history=HistoryConfig(
            enabled=_as_bool(history_section.get("enabled"), history_defaults.enabled, "learnFromHistory.enabled"),
            commit_count=_as_int(
                _lookup(history_section, "commitCount", "commit_count"),
                history_defaults.commit_count,
                "learnFromHistory.commitCount",
            ),
        ),
        breaking_change_detection=BreakingChangeConfig(
            enabled=_as_bool(
                breaking_section.get("enabled"), breaking_defaults.enabled, "breakingChangeDetection.enabled"
            ),
            keywords=[
                k.lower()
                for k in _as_str_list(
                    breaking_section.get("keywords"), breaking_defaults.keywords, "breakingChangeDetection.keywords"
                )
            ],
            include_footer=_as_bool(
                _lookup(breaking_section, "includeFooter", "include_footer"),
                breaking_defaults.include_footer,
                "breakingChangeDetection.includeFooter",
            ),
        ),
        templates=TemplatesConfig(
            default=_as_str(templates_section.get("default"), None, "templates.default"),
            no_scope=_as_str(_lookup(templates_section, "noScope", "no_scope"), None, "templates.noScope"),
            with_body=_as_str(_lookup(templates_section, "withBody", "with_body"), None, "templates.withBody"),
        ),
        ai=AIConfig(
            enabled=_as_bool(ai_section.get("enabled"), ai_defaults.enabled, "ai.enabled"),
            provider=_as_choice(ai_section.get("provider"), ai_defaults.provider, AI_PROVIDERS, "ai.provider"),
            api_key=_as_str(_lookup(ai_section, "apiKey", "api_key"), ai_defaults.api_key, "ai.apiKey"),
            model=_as_str(ai_section.get("model"), ai_defaults.model, "ai.model"),
            timeout=_as_float(ai_section.get("timeout"), ai_defaults.timeout, "ai.timeout"),
        ),
    )


def config_to_dict(config: CommitGenieConfig) -> dict:
    """Convert CommitGenieConfig to an rc-file style dictionary.

    The AI api key is never written out.

    Args:
        config: CommitGenieConfig instance.

    Returns:
        Dictionary representation.
    """
    return {
        "scopes": [{"pattern": m.pattern, "scope": m.scope} for m in config.scopes],
        "defaultType": config.default_type,
        "includeEmoji": config.include_emoji,
        "maxMessageLength": config.max_message_length,
        "customPatterns": [
            {"pattern": p.pattern, "type": p.type} for p in config.custom_patterns
        ],
        "ticketLinking": {
            "enabled": config.ticket_linking.enabled,
            "patterns": config.ticket_linking.patterns,
            "prefix": config.ticket_linking.prefix,
        },
        "learnFromHistory": {
            "enabled": config.learn_from_history.enabled,
            "commitCount": config.learn_from_history.commit_count,
        },
        "breakingChangeDetection": {
            "enabled": config.breaking_change_detection.enabled,
            "keywords": config.breaking_change_detection.keywords,
            "includeFooter": config.breaking_change_detection.include_footer,
        },
        "templates": {
            "default": config.templates.default,
            "noScope": config.templates.no_scope,
            "withBody": config.templates.with_body,
        },
        "ai": {
            "enabled": config.ai.enabled,
            "provider": config.ai.provider,
            "model": config.ai.model,
            "timeout": config.ai.timeout,
        },
    }


# ============================================================
# Discovery
# ============================================================


def find_config_file(search_dirs: list[Path]) -> Optional[Path]:
    """Find the first existing config file.

    Args:
        search_dirs: Directories to search, in priority order.

    Returns:
        Path to the config file, or None if none exists.
    """
    for directory in search_dirs:
        for filename in CONFIG_FILES:
            candidate = Path(directory) / filename
            if candidate.is_file():
                return candidate
    return None


def load_config_file(path: Path) -> dict:
    """Read and parse a config file.

    JSON rc files are parsed by the YAML loader as well.

    Args:
        path: Path to the config file.

    Returns:
        The parsed dictionary (empty for an empty file).

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def sample_config() -> CommitGenieConfig:
    """Starter configuration written by `commitgenie config init`."""
    return CommitGenieConfig(
        scopes=[
            ScopeMapping(pattern="src/api", scope="api"),
            ScopeMapping(pattern="src/components", scope="ui"),
            ScopeMapping(pattern="src/utils", scope="utils"),
        ],
    )


def init_config_file(directory: Optional[Path] = None) -> Path:
    """Write a starter rc file.

    Args:
        directory: Target directory. Defaults to the git root, or the current
            directory outside a repository.

    Returns:
        Path to the written file.

    Raises:
        ConfigError: If a config file already exists there or cannot be written.
    """
    if directory is None:
        directory = _default_search_dirs()[0]

    existing = find_config_file([directory])
    if existing is not None:
        raise ConfigError(f"Config file already exists: {existing}")

    path = Path(directory) / DEFAULT_CONFIG_FILE
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(sample_config()), f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise ConfigError(f"Failed to write config to {path}: {e}")

    logger.debug("Wrote starter config to %s", path)
    return path


def _default_search_dirs() -> list[Path]:
    from commitgenie.git import GitError, get_repo_root

    dirs = []
    try:
        dirs.append(get_repo_root())
    except GitError:
        # Not in a git repository
        pass
    cwd = Path.cwd()
    if cwd not in dirs:
        dirs.append(cwd)
    return dirs


_cached_config: Optional[CommitGenieConfig] = None


def get_config(search_dirs: Optional[list[Path]] = None) -> CommitGenieConfig:
    """Resolve the configuration, caching it for the process.

    Never raises: a missing or unparsable file yields the defaults.

    Args:
        search_dirs: Directories to search. Defaults to the git root and the
            current working directory.

    Returns:
        The resolved CommitGenieConfig.
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    if search_dirs is None:
        search_dirs = _default_search_dirs()

    config_path = find_config_file(search_dirs)
    if config_path is None:
        logger.debug("No config file found, using defaults")
        _cached_config = CommitGenieConfig()
        return _cached_config

    try:
        _cached_config = load_config_from_dict(load_config_file(config_path))
        logger.debug("Loaded config from %s", config_path)
    except ConfigError as e:
        logger.warning("%s; using default configuration", e)
        _cached_config = CommitGenieConfig()

    return _cached_config


def clear_config_cache() -> None:
    """Forget the cached configuration."""
    global _cached_config
    _cached_config = None
