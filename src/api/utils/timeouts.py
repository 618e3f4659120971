import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import Request
from libs.result import Error
from src.api.error import ServerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORAGE_TIMEOUT = 10.0


async def with_storage_timeout(
    awaitable: Awaitable[T], request: Optional[Request] = None, timeout: Optional[float] = None
) -> T:
    """
    Await a storage-bound use case with an upper bound on its duration.

    The bound comes from the explicit timeout, then app.state.storage_timeout,
    then DEFAULT_STORAGE_TIMEOUT. On expiry the use case is cancelled, its
    unit of work rolls back and a STORAGE_TIMEOUT server error is raised.
    """
    if timeout is None and request is not None:
        timeout = getattr(request.app.state, "storage_timeout", None)
    if timeout is None:
        timeout = DEFAULT_STORAGE_TIMEOUT

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Storage operation exceeded {timeout}s")
        raise ServerError(Error("STORAGE_TIMEOUT", "Storage operation timed out"))
