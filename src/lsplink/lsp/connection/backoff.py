"""Capped exponential backoff."""

import random

DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0


def compute_backoff(
    attempt: int,
    base: float = DEFAULT_BASE_DELAY,
    ceiling: float = DEFAULT_MAX_DELAY,
    jitter: float = 0.0,
) -> float:
    """
    Delay in seconds before reconnection attempt number `attempt`.

    min(base * 2**attempt, ceiling), optionally spread by up to
    +/- `jitter` (a fraction of the delay). Attempt numbering starts
    at 1, so with the defaults the sequence is 2, 4, 8, 16, 30.
    """
    if attempt < 0:
        raise ValueError("attempt must be non-negative")

    delay = min(base * (2**attempt), ceiling)
    if jitter:
        delay += delay * random.uniform(-jitter, jitter)
        delay = max(0.0, min(delay, ceiling))
    return delay
