from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Protocol

from .models.funnel import FunnelDraft

logger = logging.getLogger(__name__)


class FunnelRepository(Protocol):
    def save(self, draft: FunnelDraft) -> FunnelDraft:
        ...

    def get(self, funnel_id: str) -> FunnelDraft | None:
        ...

    def list_funnels(self) -> list[FunnelDraft]:
        ...


class FunnelStore:
    """In-memory funnel store used in dev; nothing survives a restart."""

    def __init__(self) -> None:
        self._funnels: Dict[str, FunnelDraft] = {}
        self._lock = threading.Lock()

    def save(self, draft: FunnelDraft) -> FunnelDraft:
        with self._lock:
            stored = draft.model_copy(deep=True)
            self._funnels[stored.id] = stored
            return stored.model_copy(deep=True)

    def get(self, funnel_id: str) -> FunnelDraft | None:
        with self._lock:
            stored = self._funnels.get(funnel_id)
            return stored.model_copy(deep=True) if stored else None

    def list_funnels(self) -> list[FunnelDraft]:
        with self._lock:
            return [draft.model_copy(deep=True) for draft in self._funnels.values()]


def load_seed_drafts(base_path: Path) -> list[FunnelDraft]:
    """Read every ``*.json`` draft in ``base_path``; a missing directory yields nothing."""
    if not base_path.is_dir():
        return []
    drafts: list[FunnelDraft] = []
    for file_path in sorted(base_path.glob("*.json")):
        with file_path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        drafts.append(FunnelDraft.model_validate(data))
    logger.info("Loaded seed funnels", extra={"path": str(base_path), "count": len(drafts)})
    return drafts


__all__ = ["FunnelRepository", "FunnelStore", "load_seed_drafts"]
