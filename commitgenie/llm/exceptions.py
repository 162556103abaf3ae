"""AI-related exception classes.

Contains:
- AIError: Base exception for AI provider errors
- MissingAPIKeyError: Raised when the provider API key is not available
"""


class AIError(Exception):
    """Base exception for AI-related errors."""

    pass


class MissingAPIKeyError(AIError):
    """Raised when the required API key is not set."""

    pass
