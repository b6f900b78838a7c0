"""Deadline wrapper for gateway calls."""

import asyncio
from typing import Awaitable, TypeVar

from skinwise.domain.shared.errors import InferenceTimeoutError

T = TypeVar("T")


async def bounded(operation: str, awaitable: Awaitable[T], timeout_s: float) -> T:
    """
    Await a gateway call with a deadline.

    Args:
        operation: Gateway operation name (for the error)
        awaitable: The pending call
        timeout_s: Deadline in seconds

    Returns:
        The call result

    Raises:
        InferenceTimeoutError: If the deadline passes first
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as e:
        raise InferenceTimeoutError(operation, timeout_s) from e
