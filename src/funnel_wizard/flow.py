from __future__ import annotations

from typing import Sequence

from .models.funnel import FunnelDraft


def move_item(flow: Sequence[str], from_index: int, to_index: int) -> list[str]:
    """Move the id at ``from_index`` to ``to_index``, shifting the ids in between.

    Both indices must lie in ``[0, len(flow))``; negative indices are not wrapped.
    """
    size = len(flow)
    for name, index in (("from_index", from_index), ("to_index", to_index)):
        if not 0 <= index < size:
            raise IndexError(f"{name} {index} out of range for flow of length {size}")

    moved = list(flow)
    if from_index == to_index:
        return moved
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def move_page(draft: FunnelDraft, from_index: int, to_index: int) -> FunnelDraft:
    return draft.model_copy(update={"flow": move_item(draft.flow, from_index, to_index)})


__all__ = ["move_item", "move_page"]
