"""Pomodoro-style focus timer state machine.

The timer never reads a clock; an external driver (see harustep.ticker)
calls tick() once per second while it runs.
"""

from __future__ import annotations

from harustep.models import TimerMode, TimerState

FOCUS_MINUTES = 25
REST_MINUTES = 5
PRESET_MINUTES = (5, 15, 25)

CANONICAL_MINUTES = {
    TimerMode.FOCUS: FOCUS_MINUTES,
    TimerMode.REST: REST_MINUTES,
}


class FocusTimer:
    def __init__(self, state: TimerState | None = None) -> None:
        self.state = state if state is not None else TimerState()

    @property
    def display(self) -> str:
        return f"{self.state.minutes:02d}:{self.state.seconds:02d}"

    @property
    def running(self) -> bool:
        return self.state.running

    def tick(self) -> bool:
        """Advance one second. Returns True when a mode boundary was crossed."""
        s = self.state
        if not s.running:
            return False

        if s.seconds > 0:
            s.seconds -= 1
            return False
        if s.minutes > 0:
            s.minutes -= 1
            s.seconds = 59
            return False

        # 00:00 -> flip mode and pause
        s.mode = TimerMode.REST if s.mode == TimerMode.FOCUS else TimerMode.FOCUS
        s.minutes = CANONICAL_MINUTES[s.mode]
        s.seconds = 0
        s.running = False
        return True

    def toggle(self) -> bool:
        self.state.running = not self.state.running
        return self.state.running

    def reset(self) -> None:
        """Pause and restore the canonical duration for the current mode."""
        self.state.running = False
        self.state.minutes = CANONICAL_MINUTES[self.state.mode]
        self.state.seconds = 0

    def set_custom_duration(self, minutes: int) -> None:
        """Pause and start a fresh focus block of the given length."""
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            raise ValueError(f"Custom duration must be a positive number of minutes, got {minutes!r}")
        self.state.running = False
        self.state.mode = TimerMode.FOCUS
        self.state.minutes = minutes
        self.state.seconds = 0
