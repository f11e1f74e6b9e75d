"""
First-success-wins helpers.

Both the origin probe and the topic cascade walk an ordered list of
candidates and stop at the first one that yields a usable value. Candidates
are evaluated lazily, in order; an attempt that raises counts as a miss.
"""

import logging
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")


def first_success(candidates: Iterable[C], attempt: Callable[[C], Optional[R]]) -> Optional[R]:
    for candidate in candidates:
        try:
            result = attempt(candidate)
        except Exception as e:
            logger.debug(f"[fallback] Attempt failed for {candidate!r}: {e}")
            continue
        if result:
            return result
    return None


async def first_success_async(candidates: Iterable[C], attempt: Callable[[C], Awaitable[Optional[R]]]) -> Optional[R]:
    for candidate in candidates:
        try:
            result = await attempt(candidate)
        except Exception as e:
            logger.debug(f"[fallback] Attempt failed for {candidate!r}: {e}")
            continue
        if result:
            return result
    return None
