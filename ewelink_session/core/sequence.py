"""Sequence and timestamp helpers for outbound commands."""

from __future__ import annotations

import time
from typing import Callable, Optional


def unix_timestamp(clock: Optional[Callable[[], float]] = None) -> int:
    """Return the current time in whole unix seconds."""

    return int((clock or time.time)())


class SequenceGenerator:
    """Produces millisecond-resolution sequence ids.

    Two calls within the same millisecond return the same id. Correlations
    are keyed by sequence and device, so only two commands for the same
    device within one millisecond collide.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.time

    def next(self) -> int:
        return int(self._clock() * 1000)
