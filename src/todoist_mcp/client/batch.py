"""
Batch dispatcher.

Runs one operation per item concurrently and collects a success or failure
record for every slot. A failing item never cancels or hides its siblings,
and the results keep the order of the input.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

I = TypeVar("I")

ItemOperation = Callable[[I], Awaitable[dict[str, Any]]]


def _item_data(item: Any) -> Any:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json", exclude_none=True)
    return item


def batch_envelope(results: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap per-item results with the overall flag and summary counts."""
    succeeded = sum(1 for r in results if r.get("success"))
    failed = len(results) - succeeded
    return {
        "success": failed == 0,
        "summary": {
            "total": len(results),
            "succeeded": succeeded,
            "failed": failed,
        },
        "results": results,
    }


async def run_batch(
    items: Sequence[I],
    operation: ItemOperation[I],
    *,
    data_key: str,
) -> dict[str, Any]:
    """
    Execute `operation` for every item and build the batch envelope.

    Args:
        items: Per-item parameters, in caller order
        operation: Coroutine returning the success payload for one item
        data_key: Key under which a failed item's original input is echoed
            back (e.g. "task_data")

    Returns:
        {"success", "summary": {"total", "succeeded", "failed"}, "results"}
    """

    async def run_one(index: int, item: I) -> dict[str, Any]:
        try:
            payload = await operation(item)
        except Exception as e:
            logger.warning("Batch item %d failed: %s", index, e)
            return {"success": False, "error": str(e), data_key: _item_data(item)}
        return {"success": True, **payload}

    results = await asyncio.gather(*(run_one(i, item) for i, item in enumerate(items)))
    envelope = batch_envelope(list(results))
    logger.info(
        "Batch finished: %d/%d succeeded",
        envelope["summary"]["succeeded"],
        envelope["summary"]["total"],
    )
    return envelope
