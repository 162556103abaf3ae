"""Renderers package for commitgenie styles.

Re-exports the renderer functions and the main render function.
"""

from typing import Optional

from commitgenie.models import CommitMessageVariant
from commitgenie.styles.renderers.base import (
    build_footer_blocks,
    build_header_prefix,
    format_type,
    sanitize_subject,
)
from commitgenie.styles.renderers.default import render_default
from commitgenie.styles.renderers.template import render_template


def render(
    variant: CommitMessageVariant,
    template: Optional[str] = None,
    include_breaking_footer: bool = True,
) -> str:
    """Render a commit message variant to its final string.

    Args:
        variant: The message variant.
        template: Custom template; None uses the built-in layout.
        include_breaking_footer: Whether breaking variants get a
            BREAKING CHANGE footer.

    Returns:
        Formatted commit message string.
    """
    if template:
        return render_template(template, variant, include_breaking_footer)
    return render_default(variant, include_breaking_footer)


__all__ = [
    # Main function
    "render",
    # Individual renderers
    "render_default",
    "render_template",
    # Utilities
    "build_footer_blocks",
    "build_header_prefix",
    "format_type",
    "sanitize_subject",
]
