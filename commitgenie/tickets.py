"""Ticket reference detection from branch names."""

import logging
import re
from typing import Optional

from commitgenie.config import TicketLinkingConfig
from commitgenie.models import TicketReference

logger = logging.getLogger(__name__)

# Common ticket patterns for issue trackers, tried in order
DEFAULT_TICKET_PATTERNS = [
    r"([A-Z]{2,10}-\d+)",  # JIRA-style: ABC-123
    r"#(\d+)",  # GitHub/GitLab: #123
    r"([A-Z]{2,10}_\d+)",  # Underscore style: ABC_123
]


def extract_ticket_from_branch(branch: str, pattern: str = DEFAULT_TICKET_PATTERNS[0]) -> Optional[str]:
    """Extract a ticket key from a branch name.

    Args:
        branch: The branch name.
        pattern: Regex pattern; group 1 is the ticket when present.

    Returns:
        The extracted ticket key or None.
    """
    match = re.search(pattern, branch)
    if match:
        return match.group(1) if match.groups() and match.group(1) else match.group(0)
    return None


def detect_ticket(branch: Optional[str], config: TicketLinkingConfig | None = None) -> Optional[TicketReference]:
    """Detect a ticket reference in the current branch name.

    Custom patterns replace the defaults when configured; invalid custom
    patterns are skipped.

    Args:
        branch: Current branch name (None or empty when unknown).
        config: Ticket linking configuration.

    Returns:
        TicketReference, or None when disabled or nothing matches.
    """
    if config is None:
        config = TicketLinkingConfig()

    if not config.enabled or not branch:
        return None

    source = "custom" if config.patterns else "branch"
    for pattern in config.patterns or DEFAULT_TICKET_PATTERNS:
        try:
            ticket_id = extract_ticket_from_branch(branch, pattern)
        except re.error as e:
            logger.warning("Skipping invalid ticket pattern %r: %s", pattern, e)
            continue
        if ticket_id:
            return TicketReference(id=ticket_id, source=source, prefix=config.prefix)

    return None
