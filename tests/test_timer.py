"""Tests for harustep/timer.py and harustep/ticker.py: focus timer."""

import asyncio

import pytest
from harustep.models import TimerMode, TimerState
from harustep.ticker import Ticker
from harustep.timer import FocusTimer


def test_initial_state():
    timer = FocusTimer()
    assert timer.display == "25:00"
    assert timer.state.mode == TimerMode.FOCUS
    assert timer.running is False


def test_tick_paused_is_noop():
    timer = FocusTimer()
    assert timer.tick() is False
    assert timer.display == "25:00"


def test_tick_counts_down():
    timer = FocusTimer()
    timer.toggle()
    timer.tick()
    assert timer.display == "24:59"
    timer.state.seconds = 1
    timer.tick()
    assert timer.display == "24:00"


def test_focus_end_switches_to_rest():
    timer = FocusTimer(TimerState(minutes=0, seconds=0, mode=TimerMode.FOCUS, running=True))
    assert timer.tick() is True
    assert timer.state.mode == TimerMode.REST
    assert timer.display == "05:00"
    assert timer.running is False


def test_rest_end_switches_to_focus():
    timer = FocusTimer(TimerState(minutes=0, seconds=0, mode=TimerMode.REST, running=True))
    assert timer.tick() is True
    assert timer.state.mode == TimerMode.FOCUS
    assert timer.display == "25:00"
    assert timer.running is False


def test_toggle():
    timer = FocusTimer()
    assert timer.toggle() is True
    assert timer.toggle() is False


def test_reset_uses_mode_duration():
    timer = FocusTimer(TimerState(minutes=2, seconds=13, mode=TimerMode.REST, running=True))
    timer.reset()
    assert timer.display == "05:00"
    assert timer.running is False

    timer = FocusTimer(TimerState(minutes=2, seconds=13, mode=TimerMode.FOCUS, running=True))
    timer.reset()
    assert timer.display == "25:00"


def test_custom_duration_forces_focus():
    timer = FocusTimer(TimerState(minutes=3, seconds=30, mode=TimerMode.REST, running=True))
    timer.set_custom_duration(15)
    assert timer.state.mode == TimerMode.FOCUS
    assert timer.display == "15:00"
    assert timer.running is False


@pytest.mark.parametrize("bad", [0, -5, 2.5, True])
def test_custom_duration_rejects_bad_minutes(bad):
    with pytest.raises(ValueError):
        FocusTimer().set_custom_duration(bad)


def test_ticker_runs_until_boundary():
    boundaries = []

    async def scenario():
        timer = FocusTimer(TimerState(minutes=0, seconds=2, running=True))
        ticker = Ticker(timer, interval=0.001, on_boundary=boundaries.append)
        ticker.start()
        await asyncio.wait_for(ticker._task, timeout=2)
        return timer

    timer = asyncio.run(scenario())
    assert timer.state.mode == TimerMode.REST
    assert timer.running is False
    assert len(boundaries) == 1


def test_ticker_survives_failing_boundary_callback(caplog):
    def explode(state):
        raise RuntimeError("listener broke")

    async def scenario():
        timer = FocusTimer(TimerState(minutes=0, seconds=1, running=True))
        ticker = Ticker(timer, interval=0.001, on_boundary=explode)
        ticker.start()
        task = ticker._task
        await asyncio.wait_for(task, timeout=2)
        return timer, task

    timer, task = asyncio.run(scenario())
    assert task.exception() is None
    assert timer.state.mode == TimerMode.REST
    assert "Timer boundary callback failed" in caplog.text


def test_ticker_stop_cancels():
    async def scenario():
        timer = FocusTimer()
        timer.toggle()
        ticker = Ticker(timer, interval=10)
        ticker.start()
        assert ticker.running
        ticker.stop()
        await asyncio.sleep(0)
        return timer, ticker

    timer, ticker = asyncio.run(scenario())
    assert ticker.running is False
    assert timer.display == "25:00"
