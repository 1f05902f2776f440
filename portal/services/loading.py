"""Degrade-to-empty loading for read paths."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from portal.exceptions import StoreUnavailableException
from portal.store.gateway import RecordStoreGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def load_or_empty(
    gateway: RecordStoreGateway,
    panel: str,
    loader: Callable[[], Awaitable[list[T]]],
) -> tuple[list[T], bool]:
    """Run a collection load, turning store failures into an empty list.

    Returns:
        Tuple of (rows, ok). ok is False when the store failed and the
        rows are an empty placeholder.
    """
    try:
        return await loader(), True
    except StoreUnavailableException:
        logger.error(f"Loading {panel} failed, rendering it empty")
        await gateway.reset()
        return [], False
