"""Commit message rendering for commitgenie.

This package provides:
- constants: COMMIT_EMOJIS, BREAKING_CHANGE_TOKEN, TEMPLATE_PLACEHOLDERS
- renderers: the built-in layout, custom templates and the render() entry point
"""

# Constants
from commitgenie.styles.constants import (
    BREAKING_CHANGE_TOKEN,
    COMMIT_EMOJIS,
    TEMPLATE_PLACEHOLDERS,
)

# Renderers
from commitgenie.styles.renderers import (
    build_header_prefix,
    format_type,
    render,
    render_default,
    render_template,
    sanitize_subject,
)


__all__ = [
    # Constants
    "BREAKING_CHANGE_TOKEN",
    "COMMIT_EMOJIS",
    "TEMPLATE_PLACEHOLDERS",
    # Renderers
    "build_header_prefix",
    "format_type",
    "render",
    "render_default",
    "render_template",
    "sanitize_subject",
]
