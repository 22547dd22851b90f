"""Session state machine: drives cycles through the stage sequence."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .clock import Clock, elapsed_between, format_time, monotonic_clock
from .cycle import Cycle, Interruption
from .scheduler import Configuration, Stage, build_configuration

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    DUE = "due"


@dataclass(frozen=True)
class RemainingTime:
    """Whole minutes and seconds left in the current stage."""

    is_due: bool
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    @property
    def display(self) -> str:
        return format_time(self.total_seconds)


@dataclass(frozen=True)
class InterruptionSummary:
    duration: int
    annotation: Optional[str]


@dataclass(frozen=True)
class SessionStatus:
    """Everything a renderer needs for one frame."""

    stage: Stage
    state: CycleState
    remaining: RemainingTime
    is_paused: bool
    pause_elapsed: int
    annotation: Optional[str]
    interruptions: Tuple[InterruptionSummary, ...]
    completed_cycles: int

    @property
    def pause_display(self) -> str:
        return format_time(self.pause_elapsed)


class Session:
    """Owns the configuration, the live cycle and the archive of finished cycles.

    Every query takes the instant to evaluate at. The event methods
    (``toggle``, ``finish_now``, ``annotate_char``, ``annotate_backspace``)
    read the injected clock instead, so drivers can forward input events
    without tracking time themselves.

    Usage:
        session = Session()
        session.toggle()                  # start
        session.toggle()                  # pause
        session.annotate_char("x")
        session.toggle()                  # resume
        remaining = session.remaining_time(session.now())
        if remaining.is_due:
            session.finish_now()
    """

    def __init__(self, configuration: Configuration | None = None, clock: Clock | None = None) -> None:
        self.configuration = configuration or build_configuration()
        self._clock = clock or monotonic_clock
        self.current_cycle = Cycle(stage_iteration=0)
        self._history: List[Cycle] = []

    @property
    def history(self) -> Tuple[Cycle, ...]:
        return tuple(self._history)

    def now(self) -> float:
        return self._clock()

    # State machine

    def toggle_timer(self, at: float) -> CycleState:
        """Start, pause or resume the current cycle, in that order of precedence."""
        cycle = self.current_cycle
        if not cycle.is_started:
            cycle.start(at)
            logger.info(f"Cycle {cycle.stage_iteration} started: {self.current_stage().value}")
            return CycleState.RUNNING
        if not cycle.is_paused:
            cycle.open_pause(at)
            logger.info(f"Cycle {cycle.stage_iteration} paused")
            return CycleState.PAUSED
        interruption = cycle.close_pause(at)
        logger.info(f"Cycle {cycle.stage_iteration} resumed after {interruption.duration(at):.0f}s")
        return CycleState.RUNNING

    def finish_current_cycle(self, at: float) -> Cycle:
        """Archive the current cycle and move on to the next stage.

        A pause still open at ``at`` is closed first so archived cycles never
        carry an open interruption.
        """
        cycle = self.current_cycle
        if cycle.is_paused:
            cycle.close_pause(at)
        cycle.mark_finished(at)
        self._history.append(cycle)
        self.current_cycle = Cycle(stage_iteration=cycle.stage_iteration + 1)
        logger.info(
            f"Cycle {cycle.stage_iteration} finished after {cycle.elapsed_active_time(at):.0f}s active, "
            f"next stage: {self.current_stage().value}"
        )
        return cycle

    # Queries

    def current_stage(self) -> Stage:
        return self.configuration.stage_at(self.current_cycle.stage_iteration)

    def is_paused(self) -> bool:
        return self.current_cycle.is_paused

    def peek_remaining_time(self, now: float) -> RemainingTime:
        """Time left in the current stage, without stamping a due cycle."""
        target = self.configuration.duration_for(self.current_stage())
        elapsed = self.current_cycle.elapsed_active_time(now)
        if elapsed >= target:
            return RemainingTime(is_due=True, minutes=0, seconds=0)
        minutes, seconds = divmod(int(math.floor(target - elapsed)), 60)
        return RemainingTime(is_due=False, minutes=minutes, seconds=seconds)

    def remaining_time(self, now: float) -> RemainingTime:
        """Time left in the current stage.

        The first query that finds the cycle due stamps its ``finished_at``
        with ``now``; use :meth:`peek_remaining_time` for a pure read.
        """
        remaining = self.peek_remaining_time(now)
        if remaining.is_due and not self.current_cycle.is_finished:
            self.current_cycle.mark_finished(now)
            logger.info(f"Cycle {self.current_cycle.stage_iteration} is due")
        return remaining

    def state(self, now: float) -> CycleState:
        cycle = self.current_cycle
        if not cycle.is_started:
            return CycleState.IDLE
        if self.peek_remaining_time(now).is_due:
            return CycleState.DUE
        return CycleState.PAUSED if cycle.is_paused else CycleState.RUNNING

    def pause_elapsed_time(self, now: float) -> int:
        interruption = self.current_cycle.open_interruption
        if interruption is None:
            return 0
        return int(elapsed_between(now, interruption.started_at))

    def interruption_history(self) -> Tuple[InterruptionSummary, ...]:
        return tuple(_summarize(interruption) for interruption in self.current_cycle.interruption_history)

    def status(self, now: float) -> SessionStatus:
        remaining = self.remaining_time(now)
        return SessionStatus(
            stage=self.current_stage(),
            state=self.state(now),
            remaining=remaining,
            is_paused=self.is_paused(),
            pause_elapsed=self.pause_elapsed_time(now),
            annotation=self.get_annotation(),
            interruptions=self.interruption_history(),
            completed_cycles=len(self._history),
        )

    # Annotation of the open pause; silently ignored when nothing is paused.

    def append_annotation_char(self, char: str) -> None:
        interruption = self.current_cycle.open_interruption
        if interruption is not None:
            interruption.append_char(char)
            logger.debug(f"Annotation is now {interruption.annotation!r}")

    def pop_annotation_char(self) -> None:
        interruption = self.current_cycle.open_interruption
        if interruption is not None:
            interruption.remove_last_char()
            logger.debug(f"Annotation is now {interruption.annotation!r}")

    def get_annotation(self) -> Optional[str]:
        interruption = self.current_cycle.open_interruption
        return interruption.annotation if interruption is not None else None

    current_annotation = get_annotation

    # Inbound events, timed by the injected clock

    def toggle(self) -> CycleState:
        return self.toggle_timer(self.now())

    def finish_now(self) -> Cycle:
        return self.finish_current_cycle(self.now())

    def annotate_char(self, char: str) -> None:
        self.append_annotation_char(char)

    def annotate_backspace(self) -> None:
        self.pop_annotation_char()


def _summarize(interruption: Interruption) -> InterruptionSummary:
    return InterruptionSummary(
        duration=int(interruption.duration(interruption.started_at)),
        annotation=interruption.annotation,
    )
