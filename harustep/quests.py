"""Daily quest board session.

Holds the current batch of quests and the mood selector, asks a
QuestGenerator for new batches, and reports completions as XP gains.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from harustep.config import DEFAULT_ENERGY_LEVEL, DEFAULT_REQUEST_TIMEOUT
from harustep.models import Quest
from harustep.providers import QuestGenerator, fallback_quests

logger = logging.getLogger(__name__)

MOODS = ("Tired", "Down", "Okay", "Motivated", "Anxious")
DEFAULT_MOOD = "Okay"


class QuestState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"


class QuestSession:
    def __init__(
        self,
        generator: QuestGenerator,
        on_experience: Callable[[int], None],
        energy_level: int = DEFAULT_ENERGY_LEVEL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.generator = generator
        self.on_experience = on_experience
        self.energy_level = energy_level
        self.timeout = timeout
        self.state = QuestState.IDLE
        self.mood = DEFAULT_MOOD
        self.quests: list[Quest] = []

    @property
    def all_complete(self) -> bool:
        return bool(self.quests) and all(q.completed for q in self.quests)

    @property
    def completed_xp(self) -> int:
        return sum(q.xp for q in self.quests if q.completed)

    def select_mood(self, mood: str) -> None:
        if mood not in MOODS:
            raise ValueError(f"Unknown mood: {mood!r} (expected one of {', '.join(MOODS)})")
        self.mood = mood

    def find(self, quest_id: str) -> Quest | None:
        for q in self.quests:
            if q.id == quest_id:
                return q
        return None

    async def request_quests(self, mood: str | None = None, energy_level: int | None = None) -> list[Quest]:
        """Replace the quest list with a freshly generated batch.

        Generator failures, malformed output and timeouts fall back to the
        built-in list; the session always ends READY.
        """
        if self.state == QuestState.LOADING:
            logger.debug("Quest request ignored: a batch is already loading")
            return list(self.quests)

        if mood is not None:
            self.select_mood(mood)
        energy = self.energy_level if energy_level is None else energy_level
        if not 0 <= energy <= 10:
            raise ValueError(f"energy_level must be 0-10, got {energy}")

        self.state = QuestState.LOADING
        try:
            proposals = await asyncio.wait_for(
                self.generator.generate(self.mood, energy), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Quest generation timed out after %ss; using fallback quests", self.timeout)
            proposals = fallback_quests()
        except asyncio.CancelledError:
            # keep the previous list and unlock the board
            self.state = QuestState.READY if self.quests else QuestState.IDLE
            raise
        except Exception as e:
            logger.warning("Quest generation failed (%s); using fallback quests", e)
            proposals = fallback_quests()

        self.quests = [Quest.from_proposal(p) for p in proposals]
        self.state = QuestState.READY
        logger.info("Loaded %d quests for mood %r", len(self.quests), self.mood)
        return list(self.quests)

    def toggle_complete(self, quest_id: str) -> Quest | None:
        """Complete a quest once and report its XP. Repeat calls are a no-op."""
        quest = self.find(quest_id)
        if quest is None or quest.completed:
            return None
        quest.completed = True
        self.on_experience(quest.xp)
        return quest
