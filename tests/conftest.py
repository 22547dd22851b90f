import pytest

from pomodorotracker import scheduler
from pomodorotracker.session import Session


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def configuration():
    return scheduler.Configuration(
        durations={
            scheduler.Stage.WORK: 10,
            scheduler.Stage.SHORT_BREAK: 3,
            scheduler.Stage.LONG_BREAK: 6,
        }
    )


@pytest.fixture
def session(configuration, clock):
    return Session(configuration, clock=clock)
