import pytest

from pomodorotracker import scheduler
from pomodorotracker.cycle import CycleStateError
from pomodorotracker.scheduler import Stage
from pomodorotracker.session import CycleState, InterruptionSummary, Session


def test_toggle_starts_pauses_and_resumes(session):
    assert session.toggle_timer(0.0) is CycleState.RUNNING
    assert session.current_cycle.started_at == 0.0
    assert session.toggle_timer(2.0) is CycleState.PAUSED
    assert session.is_paused()
    assert session.toggle_timer(4.0) is CycleState.RUNNING
    assert not session.is_paused()
    assert len(session.current_cycle.interruption_history) == 1


def test_history_length_tracks_completed_pauses(session):
    session.toggle_timer(0.0)
    for step in range(1, 12):
        session.toggle_timer(float(step))
        cycle = session.current_cycle
        assert cycle.open_interruption is None or not cycle.open_interruption.finished_at
        assert len(cycle.interruption_history) == step // 2


def test_remaining_time_before_due_and_due_stamp(session):
    """Work of 10s: five seconds in, five remain; at eleven seconds it is due."""
    session.toggle_timer(0.0)

    remaining = session.remaining_time(5.0)
    assert not remaining.is_due
    assert remaining.display == "00:05"
    assert session.current_cycle.finished_at is None

    remaining = session.remaining_time(11.0)
    assert remaining.is_due
    assert remaining.display == "00:00"
    assert session.current_cycle.finished_at == 11.0

    session.remaining_time(12.0)
    assert session.current_cycle.finished_at == 11.0


def test_remaining_time_excludes_pause(session):
    session.toggle_timer(0.0)
    session.toggle_timer(3.0)
    session.toggle_timer(8.0)
    remaining = session.remaining_time(9.0)
    assert not remaining.is_due
    assert remaining.display == "00:06"


def test_remaining_time_floors_fractional_seconds(session):
    session.toggle_timer(0.0)
    assert session.remaining_time(0.4).display == "00:09"


def test_remaining_time_is_stable_while_paused(session):
    session.toggle_timer(0.0)
    session.toggle_timer(4.0)
    readings = {session.remaining_time(now) for now in (4.0, 30.0, 500.0)}
    assert len(readings) == 1
    assert session.current_cycle.finished_at is None


def test_remaining_time_never_increases_while_running(session):
    session.toggle_timer(0.0)
    readings = [session.remaining_time(now / 2).total_seconds for now in range(0, 25)]
    assert readings == sorted(readings, reverse=True)


def test_peek_does_not_stamp(session):
    session.toggle_timer(0.0)
    assert session.peek_remaining_time(50.0).is_due
    assert session.current_cycle.finished_at is None


def test_long_stage_widens_minutes():
    configuration = scheduler.build_configuration(work_minutes=150)
    session = Session(configuration, clock=lambda: 0.0)
    assert session.remaining_time(0.0).display == "150:00"


def test_annotation_only_while_paused(session):
    session.toggle_timer(0.0)
    session.toggle_timer(1.0)
    session.append_annotation_char("a")
    session.append_annotation_char("b")
    assert session.get_annotation() == "ab"
    session.pop_annotation_char()
    assert session.get_annotation() == "a"

    session.toggle_timer(2.0)
    session.append_annotation_char("z")
    session.pop_annotation_char()
    assert session.get_annotation() is None
    assert session.current_cycle.interruption_history[0].annotation == "a"
    assert session.interruption_history() == (InterruptionSummary(duration=1, annotation="a"),)


def test_annotation_is_noop_when_idle(session):
    session.append_annotation_char("x")
    session.pop_annotation_char()
    assert session.current_annotation() is None


def test_finish_twice_archives_empty_cycle(session):
    session.toggle_timer(0.0)
    first = session.finish_current_cycle(4.0)
    second = session.finish_current_cycle(5.0)

    assert [cycle.stage_iteration for cycle in session.history] == [0, 1]
    assert first.finished_at == 4.0
    assert second.started_at is None
    assert second.elapsed_active_time(5.0) == 0.0
    assert session.current_cycle.stage_iteration == 2
    assert session.current_stage() is Stage.WORK


def test_finish_keeps_due_stamp(session):
    session.toggle_timer(0.0)
    session.remaining_time(11.0)
    archived = session.finish_current_cycle(15.0)
    assert archived.finished_at == 11.0


def test_finish_while_paused_closes_pause(session):
    session.toggle_timer(0.0)
    session.toggle_timer(2.0)
    session.append_annotation_char("q")
    archived = session.finish_current_cycle(6.0)
    assert archived.open_interruption is None
    assert archived.interruption_history[0].finished_at == 6.0
    assert archived.interruption_history[0].annotation == "q"


def test_stage_order_follows_default_sequence(session):
    seen = []
    for _ in range(9):
        seen.append(session.current_stage())
        session.finish_current_cycle(0.0)
    assert seen == [
        Stage.WORK,
        Stage.SHORT_BREAK,
        Stage.WORK,
        Stage.SHORT_BREAK,
        Stage.WORK,
        Stage.SHORT_BREAK,
        Stage.WORK,
        Stage.LONG_BREAK,
        Stage.WORK,
    ]


def test_pause_elapsed_time(session):
    assert session.pause_elapsed_time(10.0) == 0
    session.toggle_timer(0.0)
    session.toggle_timer(3.0)
    assert session.pause_elapsed_time(7.9) == 4
    session.toggle_timer(8.0)
    assert session.pause_elapsed_time(9.0) == 0


def test_state_reports_each_phase(session):
    assert session.state(0.0) is CycleState.IDLE
    session.toggle_timer(0.0)
    assert session.state(1.0) is CycleState.RUNNING
    session.toggle_timer(2.0)
    assert session.state(3.0) is CycleState.PAUSED
    session.toggle_timer(3.0)
    assert session.state(20.0) is CycleState.DUE


def test_history_is_read_only(session):
    session.finish_current_cycle(0.0)
    with pytest.raises(AttributeError):
        session.history.append(None)


def test_events_read_injected_clock(session, clock):
    session.toggle()
    clock.advance(2)
    session.toggle()
    session.annotate_char("p")
    session.annotate_char("h")
    session.annotate_backspace()
    clock.advance(5)
    session.toggle()
    clock.advance(1)

    status = session.status(clock())
    assert status.remaining.display == "00:07"
    assert status.interruptions == (InterruptionSummary(duration=5, annotation="p"),)

    archived = session.finish_now()
    assert archived.finished_at == 8.0
    assert session.current_stage() is Stage.SHORT_BREAK


def test_status_while_paused(session, clock):
    session.toggle_timer(0.0)
    session.toggle_timer(4.0)
    session.append_annotation_char("x")
    status = session.status(70.0)
    assert status.state is CycleState.PAUSED
    assert status.is_paused
    assert status.pause_display == "01:06"
    assert status.annotation == "x"
    assert status.completed_cycles == 0


def test_protocol_violation_fails_loudly(session):
    with pytest.raises(CycleStateError):
        session.current_cycle.close_pause(1.0)
