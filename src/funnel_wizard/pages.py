from __future__ import annotations

from .models.funnel import FunnelDraft, FunnelPage, PageContent, PageType


def add_page(draft: FunnelDraft, page_type: PageType | str) -> tuple[FunnelDraft, FunnelPage]:
    """Create an empty page of ``page_type`` and append it to both pages and flow."""
    page = FunnelPage(type=PageType(page_type), content=PageContent())
    updated = draft.model_copy(
        update={
            "pages": [*draft.pages, page],
            "flow": [*draft.flow, page.id],
        }
    )
    return updated, page


def update_page_content(draft: FunnelDraft, page_id: str, updated_page: FunnelPage) -> FunnelDraft:
    """Replace the page stored under ``page_id``; unknown ids leave the draft as is."""
    existing = find_page(draft, page_id)
    if existing is None:
        return draft
    # Id and type are fixed at creation; only the content is taken from the edit.
    replacement = updated_page.model_copy(update={"id": existing.id, "type": existing.type})
    pages = [replacement if page.id == page_id else page for page in draft.pages]
    return draft.model_copy(update={"pages": pages})


def find_page(draft: FunnelDraft, page_id: str) -> FunnelPage | None:
    for page in draft.pages:
        if page.id == page_id:
            return page
    return None


def sequenced_pages(draft: FunnelDraft) -> list[FunnelPage]:
    pages = {page.id: page for page in draft.pages}
    return [pages[page_id] for page_id in draft.flow if page_id in pages]


__all__ = ["add_page", "find_page", "sequenced_pages", "update_page_content"]
