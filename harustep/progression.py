"""XP and level progression for HaruStep.

Levels follow an exponential curve: each level needs 20% more XP than the
previous one. Overflow XP carries into the next level.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from harustep.models import MoodEntry, UserState

LEVEL_CURVE = 1.2

# Shown on the dashboard chart before any mood has been logged.
PLACEHOLDER_MOODS = (
    MoodEntry("Mon", 3),
    MoodEntry("Tue", 4),
    MoodEntry("Wed", 2),
    MoodEntry("Thu", 5),
    MoodEntry("Fri", 6),
    MoodEntry("Sat", 5),
    MoodEntry("Sun", 7),
)


@dataclass(frozen=True)
class LevelUp:
    level: int

    @property
    def message(self) -> str:
        return f"Congratulations! You grew to level {self.level}!"

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "message": self.message}


@dataclass(frozen=True)
class Progression:
    """Result of applying experience: the new state plus any level-ups it caused."""

    state: UserState
    level_ups: tuple[LevelUp, ...] = field(default_factory=tuple)

    @property
    def leveled_up(self) -> bool:
        return bool(self.level_ups)


def next_threshold(threshold: int) -> int:
    return math.floor(threshold * LEVEL_CURVE)


def apply_experience(
    state: UserState,
    xp_gained: int,
    on_level_up: Callable[[LevelUp], None] | None = None,
) -> Progression:
    """Add xp_gained to state and return the resulting Progression.

    Every threshold crossed grants a level, so a single large gain can
    produce several LevelUp events. The input state is left untouched.
    """
    if xp_gained < 0:
        raise ValueError(f"xp_gained must be non-negative, got {xp_gained}")

    level = state.level
    xp = state.current_xp + xp_gained
    threshold = state.next_level_xp
    level_ups = []

    while xp >= threshold:
        level += 1
        xp -= threshold
        threshold = next_threshold(threshold)
        event = LevelUp(level)
        level_ups.append(event)
        if on_level_up is not None:
            on_level_up(event)

    new_state = replace(state, level=level, current_xp=xp, next_level_xp=threshold)
    return Progression(state=new_state, level_ups=tuple(level_ups))


def level_progress(state: UserState) -> float:
    """Percent of the way to the next level, capped at 100."""
    return min(100.0, state.current_xp / state.next_level_xp * 100)


def dashboard_summary(state: UserState, energy_level: int) -> dict[str, Any]:
    """Everything the dashboard screen shows, as a JSON-ready dict."""
    chart = state.mood_history or PLACEHOLDER_MOODS
    return {
        "level": state.level,
        "currentXp": state.current_xp,
        "nextLevelXp": state.next_level_xp,
        "progressPct": round(level_progress(state), 1),
        "streak": state.streak,
        "energyLevel": energy_level,
        "moodChart": [m.to_dict() for m in chart],
        "moodChartPlaceholder": not state.mood_history,
    }
