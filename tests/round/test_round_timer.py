"""Bounded context: Round clock

The clock counts only audible playback, freezes at pause and never leaks
into the next round.
"""

import threading
import time

import pytest

from songguess.adapters.timer.thread_scheduler import ThreadScheduler
from songguess.domain.model import RoundPhase
from songguess.domain.round import RoundStateMachine


class TestClockStartsWithAudio:
    def test_clock_does_not_run_before_playback_is_acknowledged(self, playback_factory, scheduler, yesterday):
        playback = playback_factory(auto_ack=False)
        machine = RoundStateMachine(playback, scheduler)

        machine.start(yesterday)
        scheduler.advance(20)
        machine.tick()

        assert machine.phase is RoundPhase.PLAYING
        assert machine.has_started_playing is False
        assert machine.elapsed_seconds == 0

    def test_clock_runs_once_playback_is_acknowledged(self, playback_factory, scheduler, yesterday):
        playback = playback_factory(auto_ack=False)
        machine = RoundStateMachine(playback, scheduler)
        machine.start(yesterday)

        playback.ack_start()
        scheduler.advance(25)

        assert machine.has_started_playing is True
        assert machine.elapsed_seconds == pytest.approx(2.5)

    def test_elapsed_time_does_not_drift(self, machine_factory, scheduler, yesterday):
        machine = machine_factory()
        machine.start(yesterday)

        scheduler.advance(3000)

        assert machine.elapsed_seconds == 300.0


class TestClockFreezesAtPause:
    def test_ticks_after_pause_are_ignored(self, machine_factory, scheduler, yesterday):
        machine = machine_factory()
        machine.start(yesterday)
        scheduler.advance(42)
        handle = scheduler.handles[-1]

        machine.pause_and_guess()
        handle.callback()
        machine.tick()
        scheduler.advance(10)

        assert handle.cancelled is True
        assert machine.elapsed_seconds == pytest.approx(4.2)

    def test_clock_stays_frozen_after_scoring(self, machine_factory, scheduler, yesterday):
        machine = machine_factory()
        machine.start(yesterday)
        scheduler.advance(7)
        machine.pause_and_guess()
        machine.submit_guess("Yesterday", "The Beatles")

        machine.tick()
        scheduler.advance(10)

        assert machine.elapsed_seconds == pytest.approx(0.7)


class TestStaleCompletions:
    """Late acknowledgements from an old round never touch the new one."""

    def test_late_start_ack_after_reset_is_dropped(self, playback_factory, scheduler, yesterday, track_a):
        playback = playback_factory(auto_ack=False)
        machine = RoundStateMachine(playback, scheduler)
        machine.start(yesterday)
        machine.reset()
        machine.start(track_a)

        playback.ack_start()  # acknowledgement for the first round
        scheduler.advance(5)

        assert machine.track == track_a
        assert machine.has_started_playing is False
        assert machine.elapsed_seconds == 0

        playback.ack_start()
        scheduler.advance(5)
        assert machine.elapsed_seconds == pytest.approx(0.5)

    def test_late_pause_error_after_reset_is_not_reported(self, playback_factory, scheduler, yesterday):
        errors = []
        playback = playback_factory(auto_ack=False)
        machine = RoundStateMachine(playback, scheduler, on_error=errors.append)
        machine.start(yesterday)
        playback.ack_start()
        machine.pause_and_guess()

        machine.reset()
        playback.ack_toggle("Playback failed. Please try again.")

        assert errors == []
        assert machine.phase is RoundPhase.IDLE

    def test_pause_error_in_current_round_is_reported(self, playback_factory, scheduler, yesterday):
        errors = []
        playback = playback_factory(auto_ack=False)
        machine = RoundStateMachine(playback, scheduler, on_error=errors.append)
        machine.start(yesterday)
        playback.ack_start()
        machine.pause_and_guess()

        playback.ack_toggle("Playback failed. Please try again.")

        assert [str(e) for e in errors] == ["Playback failed. Please try again."]
        assert machine.phase is RoundPhase.GUESSING

    def test_reset_cancels_the_ticker(self, machine_factory, scheduler, yesterday):
        machine = machine_factory()
        machine.start(yesterday)
        scheduler.advance(3)

        machine.reset()

        assert scheduler.active == []


class TestThreadScheduler:
    def test_callbacks_fire_repeatedly_until_cancelled(self):
        calls = []
        fired = threading.Event()

        def tick():
            calls.append(time.monotonic())
            if len(calls) >= 3:
                fired.set()

        handle = ThreadScheduler().schedule_repeating(0.01, tick)
        assert fired.wait(timeout=2.0)
        handle.cancel()
        count_at_cancel = len(calls)
        time.sleep(0.05)

        assert handle.cancelled is True
        # At most one callback can already be in flight when cancel is called.
        assert len(calls) <= count_at_cancel + 1

    def test_cancel_from_inside_the_callback_does_not_deadlock(self):
        done = threading.Event()
        box = {}

        def tick():
            box["handle"].cancel()
            done.set()

        box["handle"] = ThreadScheduler().schedule_repeating(0.01, tick)

        assert done.wait(timeout=2.0)
        assert box["handle"].cancelled is True

    def test_round_clock_advances_on_a_real_thread(self, playback, yesterday):
        machine = RoundStateMachine(playback, ThreadScheduler(), tick_seconds=0.01)
        machine.start(yesterday)

        deadline = time.monotonic() + 2.0
        while machine.elapsed_seconds == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        machine.pause_and_guess()
        frozen = machine.elapsed_seconds
        time.sleep(0.05)

        assert frozen > 0
        assert machine.elapsed_seconds == frozen
        machine.dispose()


@pytest.fixture
def machine_factory(playback, scheduler):
    def _factory(**kwargs):
        return RoundStateMachine(playback, scheduler, **kwargs)

    return _factory
