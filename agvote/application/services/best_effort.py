"""Fire-and-forget wrapper for side channels.

Broadcasts and audit appends happen after the primary write is durable.
Whatever they raise is logged and discarded so that the caller's outcome
is decided by the primary operation alone.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from structlog import get_logger

logger = get_logger(__name__)


async def notify_best_effort(
    action: Callable[[], Awaitable[Any]],
    event: str,
    log: Any = None,
) -> bool:
    """Run a side-channel action and swallow any failure.

    Args:
        action: Zero-argument callable returning the awaitable to run.
        event: Name of the side effect, used in the failure log entry.
        log: Bound logger carrying the operation's context.

    Returns:
        True if the action completed, False if it failed.
    """
    try:
        await action()
    except Exception as e:
        (log or logger).error(
            "Side-channel notification failed, primary operation unaffected",
            side_effect=event,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True
