"""Suggestion composition.

Turns a ClassificationResult into an ordered list of rendered commit message
variants. The first variant is always the recommended message; the others
each drop or swap one element and are only kept when that changes the
rendered text.
"""

from dataclasses import dataclass, replace
from typing import Optional

from commitgenie.config import CommitGenieConfig
from commitgenie.history import suggest_scope_from_profile
from commitgenie.models import (
    ClassificationResult,
    CommitMessageVariant,
    GroupedFileChanges,
    HistoryProfile,
    TicketReference,
)
from commitgenie.styles import COMMIT_EMOJIS, build_header_prefix, render, sanitize_subject

LABEL_RECOMMENDED = "Recommended"
LABEL_BREAKING = "Breaking Change"
LABEL_NO_SCOPE = "No Scope"
LABEL_ALTERNATIVE = "Alternative Description"
LABEL_WITHOUT_BODY = "Without Body"
LABEL_WITHOUT_TICKET = "Without Ticket"
LABEL_WITHOUT_BREAKING = "Without Breaking Flag"
LABEL_AI = "AI Suggested"

# Descriptions are never truncated below this length
MIN_DESCRIPTION_LENGTH = 10


@dataclass(frozen=True)
class VariantFields:
    """Unrendered fields of a variant."""

    label: str
    scope: Optional[str]
    description: str
    body: Optional[str]
    is_breaking: bool
    breaking_reasons: tuple[str, ...]
    ticket: Optional[TicketReference]


def _all_paths(file_changes: GroupedFileChanges) -> list[str]:
    return [*file_changes.added, *file_changes.modified, *file_changes.deleted, *file_changes.renamed]


def resolve_emoji(classification: ClassificationResult, profile: HistoryProfile, config: CommitGenieConfig) -> Optional[str]:
    """Return the emoji for the commit type, or None when emojis are off.

    An explicit includeEmoji setting wins over the history profile.
    """
    include = config.include_emoji if config.include_emoji is not None else profile.uses_emojis
    return COMMIT_EMOJIS[classification.commit_type] if include else None


def select_template(config: CommitGenieConfig, scope: Optional[str], body: Optional[str]) -> Optional[str]:
    """Pick the configured template for a variant.

    Args:
        config: Resolved configuration.
        scope: The variant's scope.
        body: The variant's body.

    Returns:
        withBody when a body exists, noScope when the scope is absent, else
        the default template. None means the built-in layout.
    """
    templates = config.templates
    if body and templates.with_body:
        return templates.with_body
    if not scope and templates.no_scope:
        return templates.no_scope
    return templates.default


def finalize_variant(variant: CommitMessageVariant, config: CommitGenieConfig) -> CommitMessageVariant:
    """Fit the header into max_message_length and render the full message."""
    room = config.max_message_length - len(build_header_prefix(variant))
    variant.description = sanitize_subject(variant.description, max(room, MIN_DESCRIPTION_LENGTH))
    variant.full = render(
        variant,
        template=select_template(config, variant.scope, variant.body),
        include_breaking_footer=config.breaking_change_detection.include_footer,
    )
    return variant


def derive_variant(
    base: CommitMessageVariant,
    variant_id: int,
    label: str,
    config: CommitGenieConfig,
    **changes,
) -> CommitMessageVariant:
    """Copy a variant with some fields changed and render it again.

    Args:
        base: The variant to copy.
        variant_id: Id of the new variant.
        label: Label of the new variant.
        config: Resolved configuration.
        **changes: Field overrides.

    Returns:
        The new, rendered variant.
    """
    variant = base.model_copy(update={"id": variant_id, "label": label, "full": "", **changes})
    return finalize_variant(variant, config)


class SuggestionComposer:
    """Builds and renders the variant list for one classification."""

    def __init__(
        self,
        classification: ClassificationResult,
        history_profile: HistoryProfile,
        ticket: Optional[TicketReference],
        config: CommitGenieConfig,
    ):
        self.classification = classification
        self.history_profile = history_profile
        self.ticket = ticket
        self.config = config
        self.emoji = resolve_emoji(classification, history_profile, config)
        self.variants: list[CommitMessageVariant] = []

    def _build(self, fields: VariantFields) -> CommitMessageVariant:
        variant = CommitMessageVariant(
            id=len(self.variants) + 1,
            label=fields.label,
            type=self.classification.commit_type,
            scope=fields.scope,
            description=fields.description,
            body=fields.body,
            is_breaking=fields.is_breaking,
            breaking_reasons=list(fields.breaking_reasons),
            ticket=fields.ticket,
            emoji=self.emoji,
        )
        return finalize_variant(variant, self.config)

    def _add(self, fields: VariantFields) -> CommitMessageVariant:
        variant = self._build(fields)
        self.variants.append(variant)
        return variant

    def _add_if_different(self, fields: VariantFields) -> None:
        candidate = self._build(fields)
        if all(candidate.full != v.full for v in self.variants):
            self.variants.append(candidate)

    def compose(self) -> list[CommitMessageVariant]:
        """Emit the recommended variant followed by the applicable alternatives."""
        result = self.classification
        scope = result.scope or suggest_scope_from_profile(self.history_profile, _all_paths(result.file_changes))
        body = result.body if result.is_large_change else None

        recommended = VariantFields(
            label=LABEL_BREAKING if result.is_breaking_change else LABEL_RECOMMENDED,
            scope=scope,
            description=result.description,
            body=body,
            is_breaking=result.is_breaking_change,
            breaking_reasons=tuple(result.breaking_reasons),
            ticket=self.ticket,
        )
        self._add(recommended)

        if scope:
            self._add_if_different(replace(recommended, label=LABEL_NO_SCOPE, scope=None))
        if result.alternative_description:
            self._add_if_different(
                replace(recommended, label=LABEL_ALTERNATIVE, description=result.alternative_description)
            )
        if body:
            self._add_if_different(replace(recommended, label=LABEL_WITHOUT_BODY, body=None))
        if self.ticket:
            self._add_if_different(replace(recommended, label=LABEL_WITHOUT_TICKET, ticket=None))
        if result.is_breaking_change:
            self._add_if_different(
                replace(recommended, label=LABEL_WITHOUT_BREAKING, is_breaking=False, breaking_reasons=())
            )

        return self.variants


def compose(
    classification: ClassificationResult,
    history_profile: HistoryProfile,
    ticket: Optional[TicketReference],
    config: CommitGenieConfig | None = None,
) -> list[CommitMessageVariant]:
    """Compose the ordered list of commit message variants.

    Args:
        classification: Result of the analysis stage.
        history_profile: Learned history profile.
        ticket: Detected ticket reference, or None.
        config: Resolved configuration.

    Returns:
        One to six variants with sequential ids starting at 1.
    """
    if config is None:
        config = CommitGenieConfig()
    return SuggestionComposer(classification, history_profile, ticket, config).compose()
