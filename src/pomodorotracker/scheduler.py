"""Stage sequence and duration configuration for a Pomodoro session."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Tuple


class Stage(Enum):
    """The kinds of interval a cycle can run."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


@dataclass(frozen=True)
class Interval:
    """Represents one planned work or break interval."""

    kind: Stage
    label: str
    duration_seconds: int


@dataclass
class PomodoroPlan:
    """Holds one full pass through the stage sequence."""

    intervals: List[Interval]

    @property
    def total_seconds(self) -> int:
        return sum(interval.duration_seconds for interval in self.intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.intervals)


@dataclass(frozen=True)
class StageSequence:
    """Fixed, repeating order of stages."""

    stages: Tuple[Stage, ...]

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError("stage sequence must contain at least one stage")
        object.__setattr__(self, "stages", tuple(Stage(stage) for stage in self.stages))

    def __len__(self) -> int:
        return len(self.stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    def stage_at(self, iteration: int) -> Stage:
        return self.stages[iteration % len(self.stages)]


def default_sequence(pomodoros: int = 4) -> StageSequence:
    """Work/short break pairs, with the last break of the round a long one."""
    if pomodoros < 1:
        raise ValueError("pomodoros must be at least 1")

    stages: List[Stage] = []
    for index in range(1, pomodoros + 1):
        stages.append(Stage.WORK)
        stages.append(Stage.LONG_BREAK if index == pomodoros else Stage.SHORT_BREAK)
    return StageSequence(tuple(stages))


DEFAULTS = {
    "pomodoros": 4,
    "work_minutes": 25,
    "short_break_minutes": 5,
    "long_break_minutes": 20,
    "tick_ms": 250,
}


@dataclass(frozen=True)
class Configuration:
    """Target duration per stage kind plus the stage order.

    ``durations`` maps each :class:`Stage` to a number of seconds. Every stage
    used by ``sequence`` must have a non-negative duration.
    """

    durations: Mapping[Stage, int]
    sequence: StageSequence = field(default_factory=default_sequence)

    def __post_init__(self) -> None:
        durations: Dict[Stage, int] = {Stage(kind): int(seconds) for kind, seconds in self.durations.items()}
        negative = [kind.value for kind, seconds in durations.items() if seconds < 0]
        if negative:
            raise ValueError(f"durations must not be negative: {', '.join(negative)}")
        missing = [kind.value for kind in set(self.sequence) if kind not in durations]
        if missing:
            raise ValueError(f"no duration configured for: {', '.join(sorted(missing))}")
        object.__setattr__(self, "durations", durations)

    def duration_for(self, stage: Stage) -> int:
        return self.durations[stage]

    def stage_at(self, iteration: int) -> Stage:
        return self.sequence.stage_at(iteration)

    def plan(self) -> PomodoroPlan:
        """List the intervals of one pass through the sequence."""
        intervals: List[Interval] = []
        work_index = 0
        short_index = 0
        for stage in self.sequence:
            if stage is Stage.WORK:
                work_index += 1
                label = f"Work {work_index}"
            elif stage is Stage.SHORT_BREAK:
                short_index += 1
                label = f"Short break {short_index}"
            else:
                label = "Long break"
            intervals.append(Interval(kind=stage, label=label, duration_seconds=self.duration_for(stage)))
        return PomodoroPlan(intervals)


def build_configuration(
    *,
    pomodoros: int = DEFAULTS["pomodoros"],
    work_minutes: int = DEFAULTS["work_minutes"],
    short_break_minutes: int = DEFAULTS["short_break_minutes"],
    long_break_minutes: int = DEFAULTS["long_break_minutes"],
    second_length: int = 60,
) -> Configuration:
    """Create a configuration with the requested durations.

    Args:
        pomodoros: Number of work stages per round before the long break.
        work_minutes: Length of each work stage.
        short_break_minutes: Length of breaks between work stages.
        long_break_minutes: Length of the break closing the round.
        second_length: Seconds per configured "minute"; 1 runs a fast demo.
    """
    if min(work_minutes, short_break_minutes, long_break_minutes) < 0:
        raise ValueError("durations must not be negative")
    if second_length < 1:
        raise ValueError("second_length must be at least 1")

    return Configuration(
        durations={
            Stage.WORK: work_minutes * second_length,
            Stage.SHORT_BREAK: short_break_minutes * second_length,
            Stage.LONG_BREAK: long_break_minutes * second_length,
        },
        sequence=default_sequence(pomodoros),
    )


def build_plan(**kwargs: int) -> PomodoroPlan:
    """Shortcut for ``build_configuration(**kwargs).plan()``."""
    return build_configuration(**kwargs).plan()
