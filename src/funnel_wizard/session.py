from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol

from . import flow, pages, profile
from .content_generation import merge_page_content
from .models.funnel import (
    FunnelDraft,
    FunnelPage,
    GeneratedContent,
    MarketingDetails,
    PageType,
    SaveResult,
    Template,
)
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    empty = "EMPTY"
    editing = "EDITING"
    validating = "VALIDATING"
    validation_failed = "VALIDATION_FAILED"
    saving = "SAVING"
    save_succeeded = "SAVE_SUCCEEDED"
    save_failed = "SAVE_FAILED"


class FunnelGateway(Protocol):
    async def generate_content(self, page_type: PageType | str, marketing_details: MarketingDetails) -> GeneratedContent:
        ...

    async def select_templates(self, draft: FunnelDraft) -> list[Template]:
        ...

    async def save_funnel(self, draft: FunnelDraft) -> SaveResult:
        ...


class FunnelLoader(Protocol):
    async def get_funnel(self, funnel_id: str) -> FunnelDraft | None:
        ...


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"


TEMPLATE_ERROR_MESSAGE = "An error occurred while fetching templates"


class WizardSession:
    """One user's editing session over a single funnel draft.

    Drafts are immutable values: every edit swaps ``draft`` for a new object,
    which is what the undo/redo stacks hold. Gateway calls are async and guarded
    by their own in-flight flag, so a second submission of the same action is
    ignored while unrelated edits keep working.
    """

    def __init__(self, gateway: FunnelGateway, *, initial_draft: FunnelDraft | None = None) -> None:
        self._gateway = gateway
        self.draft = initial_draft if initial_draft is not None else FunnelDraft()
        self.state = SessionState.editing if initial_draft is not None else SessionState.empty
        self.errors: ValidationResult = {}
        self.notifications: list[Notification] = []

        self.is_saving = False
        self.is_generating = False
        self.loading = False

        self.templates: list[Template] = []
        self.template_error: str | None = None
        self.selected_template: str | None = None
        self.preview_page_id: str | None = None
        self.editing_page: FunnelPage | None = None

        self._undo: list[FunnelDraft] = []
        self._redo: list[FunnelDraft] = []

    # Draft edits

    def add_page(self, page_type: PageType | str) -> FunnelPage:
        draft, page = pages.add_page(self.draft, page_type)
        self._apply(draft)
        return page

    def move_page(self, from_index: int, to_index: int) -> None:
        self._apply(flow.move_page(self.draft, from_index, to_index))

    def update_page(self, page: FunnelPage) -> None:
        self._apply(pages.update_page_content(self.draft, page.id, page))

    def set_name(self, name: str) -> None:
        self._apply(profile.set_name(self.draft, name))

    def set_description(self, description: str) -> None:
        self._apply(profile.set_description(self.draft, description))

    def set_target_audience(self, target_audience: str) -> None:
        self._apply(profile.set_target_audience(self.draft, target_audience))

    def set_product_description(self, product_description: str) -> None:
        self._apply(profile.set_product_description(self.draft, product_description))

    def set_goals(self, goals: Iterable[str]) -> None:
        self._apply(profile.set_goals(self.draft, goals))

    def toggle_goal(self, goal: str, selected: bool) -> None:
        self._apply(profile.toggle_goal(self.draft, goal, selected))

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.draft)
        self._restore(self._undo.pop())
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.draft)
        self._restore(self._redo.pop())
        return True

    @property
    def flow_pages(self) -> list[FunnelPage]:
        return pages.sequenced_pages(self.draft)

    # Page editor

    def open_page_editor(self, page_id: str) -> FunnelPage:
        page = pages.find_page(self.draft, page_id)
        if page is None:
            raise ValueError(f"Unknown page: {page_id}")
        self.editing_page = page.model_copy(deep=True)
        return self.editing_page

    def edit_page_field(self, name: str, value: object) -> None:
        page = self._require_editor()
        self.editing_page = page.model_copy(update={"content": page.content.with_field(name, value)})

    async def generate_page_content(self) -> bool:
        page = self._require_editor()
        if self.is_generating:
            return False

        self.is_generating = True
        try:
            generated = await self._gateway.generate_content(page.type, self.draft.marketing_details)
        except Exception as exc:
            logger.error(
                "Error generating content",
                exc_info=True,
                extra={"funnel_id": self.draft.id, "page_id": page.id, "error": str(exc)},
            )
            self._notify("Error", "Failed to generate content. Please try again.", "destructive")
            return False
        finally:
            self.is_generating = False

        # The editor may have been closed or switched while the call was out.
        if self.editing_page is not None and self.editing_page.id == page.id:
            self.editing_page = merge_page_content(self.editing_page, generated)
        self._notify("Content Generated", "AI-generated content has been added to the page.")
        return True

    def commit_page_edit(self) -> None:
        page = self._require_editor()
        self.update_page(page)
        self.editing_page = None

    def close_page_editor(self) -> None:
        self.editing_page = None

    # Templates and preview

    @property
    def templates_available(self) -> bool:
        return len(self.draft.marketing_details.goals) > 0

    @property
    def flow_visible(self) -> bool:
        return self.selected_template is not None and len(self.draft.flow) > 0

    async def load_templates(self) -> list[Template]:
        if self.loading:
            return self.templates

        self.loading = True
        self.template_error = None
        try:
            self.templates = await self._gateway.select_templates(self.draft)
        except Exception as exc:
            logger.error(
                "Error selecting templates",
                exc_info=True,
                extra={"funnel_id": self.draft.id, "error": str(exc)},
            )
            self.template_error = TEMPLATE_ERROR_MESSAGE
        finally:
            self.loading = False
        return self.templates

    def select_template(self, template_id: str) -> None:
        self.selected_template = template_id

    def preview_page(self, page_id: str) -> FunnelPage:
        page = pages.find_page(self.draft, page_id)
        if page is None:
            raise ValueError(f"Unknown page: {page_id}")
        self.preview_page_id = page_id
        return page

    @property
    def previewed_page(self) -> FunnelPage | None:
        if self.preview_page_id is None:
            return None
        return pages.find_page(self.draft, self.preview_page_id)

    # Validation and save

    def validate(self) -> ValidationResult:
        self.errors = validate(self.draft)
        return self.errors

    async def save(self) -> bool:
        if self.is_saving:
            return False

        self.state = SessionState.validating
        if self.validate():
            self.state = SessionState.validation_failed
            self._notify("Validation Error", "Please fill in all required fields", "destructive")
            return False

        snapshot = self.draft
        self.state = SessionState.saving
        self.is_saving = True
        result: SaveResult | None = None
        try:
            result = await self._gateway.save_funnel(snapshot)
        except Exception as exc:
            logger.error(
                "Error saving funnel",
                exc_info=True,
                extra={"funnel_id": snapshot.id, "error": str(exc)},
            )
        finally:
            self.is_saving = False

        if result is None or not result.success:
            if result is not None:
                logger.warning(
                    "Funnel save rejected",
                    extra={"funnel_id": snapshot.id, "reason": result.message},
                )
            self.state = SessionState.save_failed
            self._notify("Error", "Failed to save funnel. Please try again.", "destructive")
            return False

        # Edits made while the save was in flight are not part of what was stored.
        self.state = SessionState.save_succeeded if self.draft is snapshot else SessionState.editing
        self._notify("Success", "Funnel saved successfully!")
        return True

    # Internals

    def _apply(self, draft: FunnelDraft) -> None:
        if draft is self.draft:
            return
        self._undo.append(self.draft)
        self._redo.clear()
        self.draft = draft
        self._mark_edited()

    def _restore(self, draft: FunnelDraft) -> None:
        self.draft = draft
        if self.editing_page is not None and pages.find_page(draft, self.editing_page.id) is None:
            self.editing_page = None
        if self.preview_page_id is not None and pages.find_page(draft, self.preview_page_id) is None:
            self.preview_page_id = None
        self._mark_edited()

    def _mark_edited(self) -> None:
        if self.state is not SessionState.saving:
            self.state = SessionState.editing

    def _require_editor(self) -> FunnelPage:
        if self.editing_page is None:
            raise ValueError("No page is open for editing")
        return self.editing_page

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        self.notifications.append(Notification(title=title, description=description, variant=variant))


async def open_funnel(gateway: FunnelGateway, loader: FunnelLoader, funnel_id: str) -> WizardSession | None:
    """Start a session on a saved funnel, or return ``None`` when the id is unknown."""
    draft = await loader.get_funnel(funnel_id)
    if draft is None:
        logger.info("Funnel not found", extra={"funnel_id": funnel_id})
        return None
    return WizardSession(gateway, initial_draft=draft)


__all__ = [
    "FunnelGateway",
    "FunnelLoader",
    "Notification",
    "SessionState",
    "TEMPLATE_ERROR_MESSAGE",
    "WizardSession",
    "open_funnel",
]
