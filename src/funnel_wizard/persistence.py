from __future__ import annotations

import logging

from .funnel_store import FunnelRepository
from .models.funnel import FunnelDraft, SaveResult

logger = logging.getLogger(__name__)

SAVE_SUCCEEDED_MESSAGE = "Funnel saved successfully"
SAVE_FAILED_MESSAGE = "Error saving funnel"


class FunnelPersistence:
    """Stores a whole draft per call and reports a boolean outcome."""

    def __init__(self, repository: FunnelRepository) -> None:
        self._repository = repository

    def save(self, draft: FunnelDraft) -> SaveResult:
        logger.info(
            "Received funnel",
            extra={"funnel_id": draft.id, "pages_count": len(draft.pages)},
        )
        try:
            self._repository.save(draft)
        except Exception as exc:
            logger.error(
                "Error saving funnel",
                exc_info=True,
                extra={"funnel_id": draft.id, "error": str(exc)},
            )
            return SaveResult(success=False, message=SAVE_FAILED_MESSAGE)
        return SaveResult(success=True, message=SAVE_SUCCEEDED_MESSAGE)


__all__ = ["FunnelPersistence", "SAVE_FAILED_MESSAGE", "SAVE_SUCCEEDED_MESSAGE"]
