"""Monotonic time helpers shared by the cycle accounting and the drivers."""
from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]

monotonic_clock: Clock = time.monotonic


def elapsed_between(later: float, earlier: float) -> float:
    """Return ``later - earlier`` in seconds, never below zero."""
    return max(0.0, later - earlier)


def format_time(seconds: int) -> str:
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"
