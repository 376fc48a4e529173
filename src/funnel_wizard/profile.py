from __future__ import annotations

from typing import Iterable

from .models.funnel import FunnelDraft, MarketingDetails

# Setters accept anything, including blanks; validation runs only on save.


def set_name(draft: FunnelDraft, name: str) -> FunnelDraft:
    return draft.model_copy(update={"name": name})


def set_description(draft: FunnelDraft, description: str) -> FunnelDraft:
    return draft.model_copy(update={"description": description})


def set_target_audience(draft: FunnelDraft, target_audience: str) -> FunnelDraft:
    return _update_details(draft, target_audience=target_audience)


def set_product_description(draft: FunnelDraft, product_description: str) -> FunnelDraft:
    return _update_details(draft, product_description=product_description)


def set_goals(draft: FunnelDraft, goals: Iterable[str]) -> FunnelDraft:
    return _update_details(draft, goals=list(goals))


def toggle_goal(draft: FunnelDraft, goal: str, selected: bool) -> FunnelDraft:
    """Checkbox semantics: select appends once, deselect drops every occurrence."""
    goals = list(draft.marketing_details.goals)
    if selected:
        if goal not in goals:
            goals.append(goal)
    else:
        goals = [existing for existing in goals if existing != goal]
    return _update_details(draft, goals=goals)


def _update_details(draft: FunnelDraft, **changes: object) -> FunnelDraft:
    details: MarketingDetails = draft.marketing_details.model_copy(update=changes)
    return draft.model_copy(update={"marketing_details": details})


__all__ = [
    "set_description",
    "set_goals",
    "set_name",
    "set_product_description",
    "set_target_audience",
    "toggle_goal",
]
