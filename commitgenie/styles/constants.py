"""Constants for commitgenie styles module.

Contains:
- COMMIT_EMOJIS: Emoji prefix for each commit type
- BREAKING_CHANGE_TOKEN: Footer token for breaking changes
- TEMPLATE_PLACEHOLDERS: Placeholders recognised in custom templates
"""

from commitgenie.models import CommitType

COMMIT_EMOJIS = {
    CommitType.FEAT: "✨",
    CommitType.FIX: "\U0001F41B",
    CommitType.DOCS: "\U0001F4DA",
    CommitType.STYLE: "\U0001F484",
    CommitType.REFACTOR: "♻️",
    CommitType.TEST: "\U0001F9EA",
    CommitType.CHORE: "\U0001F527",
    CommitType.PERF: "⚡",
}

BREAKING_CHANGE_TOKEN = "BREAKING CHANGE"

TEMPLATE_PLACEHOLDERS = ["{emoji}", "{type}", "{scope}", "{description}", "{body}"]
