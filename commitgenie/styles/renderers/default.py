"""Built-in commit message layout.

Format:
    <emoji> <type>(<scope>)!: <description>

    <body>

    BREAKING CHANGE: <first reason>
      - <other reason>

    Refs: <ticket>
"""

from commitgenie.models import CommitMessageVariant
from commitgenie.styles.renderers.base import build_footer_blocks, build_header_prefix


def render_default(variant: CommitMessageVariant, include_breaking_footer: bool = True) -> str:
    """Render a variant with the built-in layout.

    Args:
        variant: The message variant.
        include_breaking_footer: Whether to append the BREAKING CHANGE block
            for breaking variants.

    Returns:
        Formatted commit message.
    """
    header = build_header_prefix(variant) + variant.description
    parts = [header]
    parts.extend(build_footer_blocks(variant, include_breaking_footer=include_breaking_footer))
    return "\n\n".join(parts)
