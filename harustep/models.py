"""Typed dataclasses for the HaruStep data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ── Enumerations ──────────────────────────────────────────────


class AppView(str, Enum):
    DASHBOARD = "DASHBOARD"
    QUESTS = "QUESTS"
    COACH = "COACH"
    FOCUS = "FOCUS"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class TimerMode(str, Enum):
    FOCUS = "FOCUS"
    REST = "REST"


def new_id() -> str:
    return uuid.uuid4().hex


# ── User state ────────────────────────────────────────────────


@dataclass(frozen=True)
class MoodEntry:
    """One point on the mood chart: a short date label and a 1-10 score."""

    date: str
    score: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MoodEntry:
        score = int(d.get("score", 5))
        if not 1 <= score <= 10:
            raise ValueError(f"Mood score must be 1-10, got {score}")
        return cls(date=str(d.get("date", "")), score=score)

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "score": self.score}


@dataclass(frozen=True)
class UserState:
    """Progression state. Replaced wholesale by apply_experience, never edited in place."""

    level: int = 1
    current_xp: int = 0
    next_level_xp: int = 100
    streak: int = 0
    mood_history: tuple[MoodEntry, ...] = ()

    @classmethod
    def seed(cls) -> UserState:
        """Session-start values."""
        scores = [("Mon", 4), ("Tue", 5), ("Wed", 3), ("Thu", 6), ("Fri", 5)]
        return cls(
            level=1,
            current_xp=45,
            next_level_xp=100,
            streak=3,
            mood_history=tuple(MoodEntry(day, score) for day, score in scores),
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UserState:
        if not d or not isinstance(d, dict):
            return cls.seed()
        base = cls.seed()
        history = d.get("moodHistory", d.get("mood_history"))
        state = cls(
            level=int(d.get("level", base.level)),
            current_xp=int(d.get("currentXp", d.get("current_xp", base.current_xp))),
            next_level_xp=int(d.get("nextLevelXp", d.get("next_level_xp", base.next_level_xp))),
            streak=int(d.get("streak", base.streak)),
            mood_history=(
                tuple(MoodEntry.from_dict(m) for m in history)
                if isinstance(history, list) else base.mood_history
            ),
        )
        errors = state.validate()
        if errors:
            raise ValueError("; ".join(errors))
        return state

    def validate(self) -> list[str]:
        errors = []
        if self.level < 1:
            errors.append("level must be >= 1")
        if self.current_xp < 0:
            errors.append("currentXp must be >= 0")
        if self.next_level_xp <= 0:
            errors.append("nextLevelXp must be > 0")
        elif self.current_xp >= self.next_level_xp:
            errors.append("currentXp must be below nextLevelXp")
        if self.streak < 0:
            errors.append("streak must be >= 0")
        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "currentXp": self.current_xp,
            "nextLevelXp": self.next_level_xp,
            "streak": self.streak,
            "moodHistory": [m.to_dict() for m in self.mood_history],
        }


# ── Quests ────────────────────────────────────────────────────


@dataclass(frozen=True)
class QuestProposal:
    """A validated quest suggestion, before it is minted into a Quest."""

    title: str
    description: str
    difficulty: Difficulty
    xp: int


@dataclass
class Quest:
    id: str = ""
    title: str = ""
    description: str = ""
    difficulty: Difficulty = Difficulty.EASY
    completed: bool = False
    xp: int = 10

    @classmethod
    def from_proposal(cls, proposal: QuestProposal) -> Quest:
        return cls(
            id=new_id(),
            title=proposal.title,
            description=proposal.description,
            difficulty=proposal.difficulty,
            completed=False,
            xp=proposal.xp,
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Quest:
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "")),
            description=str(d.get("description", "")),
            difficulty=Difficulty(str(d.get("difficulty", "EASY")).upper()),
            completed=bool(d.get("completed", False)),
            xp=int(d.get("xp", 10)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "completed": self.completed,
            "xp": self.xp,
        }


# ── Chat ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    text: str
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ChatMessage:
        ts = d.get("timestamp")
        return cls(
            role=Role(str(d.get("role", "user"))),
            text=str(d.get("text", "")),
            id=str(d.get("id") or new_id()),
            timestamp=datetime.fromisoformat(ts) if ts else datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
        }


# ── Focus timer ───────────────────────────────────────────────


@dataclass
class TimerState:
    minutes: int = 25
    seconds: int = 0
    mode: TimerMode = TimerMode.FOCUS
    running: bool = False

    @property
    def remaining_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "minutes": self.minutes,
            "seconds": self.seconds,
            "mode": self.mode.value,
            "running": self.running,
            "display": f"{self.minutes:02d}:{self.seconds:02d}",
        }
