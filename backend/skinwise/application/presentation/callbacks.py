"""Callback adapter for UI layers that expect start/success/error hooks."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from skinwise.domain.shared.outcome import AnalysisErrorKind, Failure, Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AnalysisCallbacks:
    """
    Optional presentation hooks.

    on_start: called before the orchestrator runs
    on_success: called with (value, preview) on success
    on_error: called with the user-facing message on failure
    """

    on_start: Optional[Callable[[], Any]] = None
    on_success: Optional[Callable[[Any, Optional[str]], Any]] = None
    on_error: Optional[Callable[[str], Any]] = None


async def run_with_callbacks(
    operation: Callable[[], Awaitable[Outcome[T]]],
    callbacks: AnalysisCallbacks,
    preview: Optional[str] = None,
    fallback_kind: AnalysisErrorKind = AnalysisErrorKind.UNEXPECTED_ERROR,
) -> Outcome[T]:
    """
    Run an orchestrator call and translate its outcome into callbacks.

    ``on_start`` fires first, then exactly one of ``on_success`` or
    ``on_error``. An exception escaping the operation is reported through
    ``on_error`` as a Failure of ``fallback_kind``.

    Args:
        operation: Zero-argument coroutine factory (e.g. a lambda calling
            ``orchestrator.analyze``)
        callbacks: Hooks to invoke
        preview: Image data URI handed to on_success for display
        fallback_kind: Error kind reported when the operation raises

    Returns:
        The orchestrator outcome
    """
    if callbacks.on_start is not None:
        callbacks.on_start()

    try:
        outcome = await operation()
    except Exception as e:
        logger.error("Operation raised instead of returning an outcome", exc_info=True)
        outcome = Failure(fallback_kind, str(e))

    if outcome.ok:
        if callbacks.on_success is not None:
            callbacks.on_success(outcome.value, preview)
    elif callbacks.on_error is not None:
        callbacks.on_error(outcome.message)

    return outcome
