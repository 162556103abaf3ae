"""Custom template renderer.

Templates are single header lines with placeholders:
- {emoji}: emoji prefix, empty when emojis are off
- {type}: commit type, including "!" for breaking variants
- {scope}: scope; "({scope})" collapses entirely when there is no scope
- {description}: the description
- {body}: optional; when present the body is placed here instead of after
  the header

Body, breaking change and ticket blocks are appended as in the built-in
layout.
"""

import re

from commitgenie.models import CommitMessageVariant
from commitgenie.styles.renderers.base import build_footer_blocks, format_type

_SCOPE_WRAPPERS_RE = re.compile(r"\(\s*\{scope\}\s*\)|\[\s*\{scope\}\s*\]")
_SPACES_RE = re.compile(r"[ \t]+")


def _normalize_whitespace(text: str) -> str:
    lines = [_SPACES_RE.sub(" ", line).strip() for line in text.strip().splitlines()]
    text = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", text)


def render_template(
    template: str,
    variant: CommitMessageVariant,
    include_breaking_footer: bool = True,
) -> str:
    """Render a variant with a user-supplied template.

    Args:
        template: Template string with placeholders.
        variant: The message variant.
        include_breaking_footer: Whether to append the BREAKING CHANGE block
            for breaking variants.

    Returns:
        Formatted commit message.
    """
    text = template
    if not variant.scope:
        text = _SCOPE_WRAPPERS_RE.sub("", text)

    body_inline = "{body}" in text
    replacements = {
        "{emoji}": variant.emoji or "",
        "{type}": format_type(variant),
        "{scope}": variant.scope or "",
        "{description}": variant.description,
        "{body}": variant.body or "",
    }
    for placeholder, value in replacements.items():
        text = text.replace(placeholder, value)

    parts = [_normalize_whitespace(text)]
    parts.extend(
        build_footer_blocks(
            variant,
            include_body=not body_inline,
            include_breaking_footer=include_breaking_footer,
        )
    )
    return "\n\n".join(p for p in parts if p)
