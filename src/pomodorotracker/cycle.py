"""Cycle and interruption accounting.

A :class:`Cycle` is one run through a single stage of the sequence. While it
runs it can be paused any number of times; every pause is recorded as an
:class:`Interruption` so the time spent paused can be taken out of the
cycle's active time.

All instants are floats read from a monotonic clock (see
:mod:`pomodorotracker.clock`).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .clock import elapsed_between


class CycleStateError(RuntimeError):
    """A cycle or interruption was driven out of protocol order."""


@dataclass
class Interruption:
    """One contiguous pause, optionally annotated."""

    started_at: float
    finished_at: Optional[float] = None
    annotation: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.finished_at is None

    def close(self, at: float) -> None:
        if self.finished_at is not None:
            raise CycleStateError("interruption is already closed")
        if at < self.started_at:
            raise CycleStateError(f"cannot close interruption at {at} before it started at {self.started_at}")
        self.finished_at = at

    def append_char(self, char: str) -> None:
        self._require_open()
        self.annotation = (self.annotation or "") + char

    def remove_last_char(self) -> None:
        self._require_open()
        if self.annotation:
            self.annotation = self.annotation[:-1]

    def duration(self, now: float) -> float:
        end = self.finished_at if self.finished_at is not None else now
        return elapsed_between(end, self.started_at)

    def _require_open(self) -> None:
        if self.finished_at is not None:
            raise CycleStateError("annotation of a closed interruption cannot change")


@dataclass
class Cycle:
    """One traversal of a single position in the stage sequence."""

    stage_iteration: int
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    interruption_history: List[Interruption] = field(default_factory=list)
    open_interruption: Optional[Interruption] = None

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_paused(self) -> bool:
        return self.open_interruption is not None

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    def start(self, at: float) -> None:
        if self.started_at is None:
            self.started_at = at

    def open_pause(self, at: float) -> Interruption:
        if self.started_at is None:
            raise CycleStateError("cannot pause a cycle that has not started")
        if self.open_interruption is not None:
            raise CycleStateError("a pause is already open")
        earliest = self.interruption_history[-1].finished_at if self.interruption_history else self.started_at
        if at < earliest:
            raise CycleStateError(f"pause at {at} would overlap earlier activity ending at {earliest}")
        self.open_interruption = Interruption(started_at=at)
        return self.open_interruption

    def close_pause(self, at: float) -> Interruption:
        interruption = self.open_interruption
        if interruption is None:
            raise CycleStateError("no pause is open")
        interruption.close(at)
        self.interruption_history.append(interruption)
        self.open_interruption = None
        return interruption

    def paused_time(self) -> float:
        """Total seconds spent in closed interruptions."""
        # history entries are closed, so the instant passed to duration() is unused
        return sum(interruption.duration(interruption.started_at) for interruption in self.interruption_history)

    def elapsed_active_time(self, now: float) -> float:
        """Seconds the cycle has been running, excluding every pause.

        While a pause is open the clock is frozen at the moment the pause
        began; the open pause itself is not subtracted since nothing after its
        start is counted in the first place.
        """
        if self.started_at is None:
            return 0.0
        if not self.interruption_history and self.open_interruption is None:
            return elapsed_between(now, self.started_at)
        until = now if self.open_interruption is None else self.open_interruption.started_at
        return max(0.0, elapsed_between(until, self.started_at) - self.paused_time())

    def mark_finished(self, at: float) -> None:
        if self.finished_at is None:
            self.finished_at = at
