from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from google.cloud import firestore

from .models.funnel import FunnelDraft

logger = logging.getLogger(__name__)


class FirestoreFunnelStore:
    """Firestore-backed funnel store for production use."""

    COLLECTION_NAME = "funnels"

    def __init__(self, project_id: str | None = None, *, client: firestore.Client | None = None) -> None:
        self._db = client or firestore.Client(project=project_id)
        self._collection = self._db.collection(self.COLLECTION_NAME)

    def save(self, draft: FunnelDraft) -> FunnelDraft:
        """Write the whole draft as one document keyed by its id."""
        doc_ref = self._collection.document(draft.id)
        doc_ref.set(self._to_firestore_dict(draft))

        logger.info(
            "Saved funnel",
            extra={
                "funnel_id": draft.id,
                "pages_count": len(draft.pages),
                "flow_length": len(draft.flow),
            },
        )
        return draft

    def get(self, funnel_id: str) -> FunnelDraft | None:
        doc = self._collection.document(funnel_id).get()
        if not doc.exists:
            return None
        return self._from_firestore_dict(doc.id, doc.to_dict())

    def list_funnels(self, *, limit: int = 100) -> list[FunnelDraft]:
        query = self._collection.order_by("updated_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [self._from_firestore_dict(doc.id, doc.to_dict()) for doc in query.stream()]

    def _to_firestore_dict(self, draft: FunnelDraft) -> dict[str, Any]:
        data = draft.model_dump(mode="json", by_alias=True, exclude={"id"})
        data["updated_at"] = datetime.now(timezone.utc)
        return data

    def _from_firestore_dict(self, funnel_id: str, data: dict[str, Any]) -> FunnelDraft:
        payload = {key: value for key, value in data.items() if key != "updated_at"}
        return FunnelDraft.model_validate({**payload, "id": funnel_id})


__all__ = ["FirestoreFunnelStore"]
