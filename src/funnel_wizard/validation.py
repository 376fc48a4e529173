from __future__ import annotations

from typing import Callable, Sequence

from .models.funnel import FunnelDraft

ValidationResult = dict[str, str]


class RequiredFieldRule:
    def __init__(self, key: str, message: str, is_missing: Callable[[FunnelDraft], bool]) -> None:
        self.key = key
        self.message = message
        self._is_missing = is_missing

    def evaluate(self, draft: FunnelDraft) -> str | None:
        return self.message if self._is_missing(draft) else None


DEFAULT_RULES: Sequence[RequiredFieldRule] = (
    RequiredFieldRule("name", "Funnel name is required", lambda d: not d.name),
    RequiredFieldRule("description", "Funnel description is required", lambda d: not d.description),
    RequiredFieldRule(
        "marketingDetails.targetAudience",
        "Target audience is required",
        lambda d: not d.marketing_details.target_audience,
    ),
    RequiredFieldRule(
        "marketingDetails.productDescription",
        "Product description is required",
        lambda d: not d.marketing_details.product_description,
    ),
    RequiredFieldRule(
        "marketingDetails.goals",
        "At least one goal must be selected",
        lambda d: len(d.marketing_details.goals) == 0,
    ),
    RequiredFieldRule(
        "pages",
        "At least one page must be added to the funnel",
        lambda d: len(d.pages) == 0,
    ),
)


def validate(draft: FunnelDraft, rules: Sequence[RequiredFieldRule] = DEFAULT_RULES) -> ValidationResult:
    """Return every failing field with its message; an empty map means save-ready.

    Each rule is evaluated independently, so all failures are reported together.
    """
    errors: ValidationResult = {}
    for rule in rules:
        message = rule.evaluate(draft)
        if message is not None:
            errors[rule.key] = message
    return errors


def is_save_ready(draft: FunnelDraft) -> bool:
    return not validate(draft)


__all__ = ["DEFAULT_RULES", "RequiredFieldRule", "ValidationResult", "is_save_ready", "validate"]
