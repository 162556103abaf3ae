"""Base utilities for message renderers.

Contains common functions used across renderers:
- sanitize_subject: Sanitize and truncate subject lines
- format_type: Commit type with the breaking marker
- build_header_prefix: The "{emoji }{type}{(scope)}{!}: " part of a header
- build_footer_blocks: Body, breaking change and ticket blocks
"""

import re

from commitgenie.models import CommitMessageVariant
from commitgenie.styles.constants import BREAKING_CHANGE_TOKEN


def sanitize_subject(subject: str, max_length: int = 72) -> str:
    """Sanitize and truncate the subject line.

    Args:
        subject: The raw subject string.
        max_length: Maximum allowed length.

    Returns:
        A sanitized single-line subject, truncated if necessary.
    """
    subject = subject.strip().split("\n")[0].strip()
    subject = re.sub(r"\s+", " ", subject)

    if len(subject) > max_length:
        if max_length <= 3:
            return subject[:max_length]
        subject = subject[: max_length - 3].rstrip() + "..."

    return subject


def format_type(variant: CommitMessageVariant) -> str:
    """Return the commit type, with "!" appended when breaking."""
    return f"{variant.type.value}!" if variant.is_breaking else variant.type.value


def build_header_prefix(variant: CommitMessageVariant) -> str:
    """Build everything in the default header that precedes the description."""
    prefix = f"{variant.emoji} " if variant.emoji else ""
    prefix += variant.type.value
    if variant.scope:
        prefix += f"({variant.scope})"
    if variant.is_breaking:
        prefix += "!"
    return prefix + ": "


def build_breaking_block(reasons: list[str]) -> str:
    """Render the BREAKING CHANGE footer.

    The first reason follows the token; additional reasons are listed as
    indented bullets.
    """
    if not reasons:
        return f"{BREAKING_CHANGE_TOKEN}: backward-incompatible change"
    lines = [f"{BREAKING_CHANGE_TOKEN}: {reasons[0]}"]
    lines.extend(f"  - {reason}" for reason in reasons[1:])
    return "\n".join(lines)


def build_footer_blocks(
    variant: CommitMessageVariant,
    include_body: bool = True,
    include_breaking_footer: bool = True,
) -> list[str]:
    """Collect the blocks that follow the header, in order.

    Args:
        variant: The message variant.
        include_body: Whether to include the body block.
        include_breaking_footer: Whether to include the BREAKING CHANGE block.

    Returns:
        List of blocks, each to be separated by a blank line.
    """
    blocks = []
    if include_body and variant.body:
        blocks.append(variant.body.strip())
    if include_breaking_footer and variant.is_breaking:
        blocks.append(build_breaking_block(variant.breaking_reasons))
    if variant.ticket:
        blocks.append(f"{variant.ticket.prefix} {variant.ticket.id}")
    return blocks
