"""Top-level app session: the active screen, the user's progression state,
and the per-screen sessions that feed into it."""

from __future__ import annotations

import logging
from typing import Any

from harustep.chat import ChatSession
from harustep.config import Config
from harustep.models import AppView, UserState
from harustep.progression import LevelUp, apply_experience, dashboard_summary
from harustep.providers import ChatResponder, QuestGenerator, select_collaborators
from harustep.quests import QuestSession
from harustep.ticker import Ticker
from harustep.timer import FocusTimer

logger = logging.getLogger(__name__)


class ViewRouter:
    def __init__(
        self,
        user_state: UserState,
        quest_generator: QuestGenerator,
        chat_responder: ChatResponder,
        config: Config | None = None,
        tick_interval: float = 1.0,
    ) -> None:
        self.config = config if config is not None else Config()
        self.view = AppView.DASHBOARD
        self.user_state = user_state
        self.last_level_ups: tuple[LevelUp, ...] = ()

        self.quests = QuestSession(
            quest_generator,
            on_experience=self.grant_experience,
            energy_level=self.config.energy_level,
            timeout=self.config.request_timeout,
        )
        self.chat = ChatSession(
            chat_responder,
            timeout=self.config.request_timeout,
            show_errors=self.config.show_chat_errors,
            tz=self.config.tz,
        )
        self.timer = FocusTimer()
        self.ticker = Ticker(self.timer, interval=tick_interval)

    @classmethod
    def from_config(cls, config: Config, client: Any = None) -> ViewRouter:
        generator, responder = select_collaborators(config, client)
        user_state = UserState.from_dict(config.user) if config.user else UserState.seed()
        return cls(user_state, generator, responder, config)

    # ── Navigation ────────────────────────────────────────────

    def navigate(self, view: AppView | str) -> AppView:
        if not isinstance(view, AppView):
            try:
                view = AppView(str(view).upper())
            except ValueError:
                raise ValueError(f"Unknown view: {view!r}") from None
        if self.view == AppView.FOCUS and view != AppView.FOCUS:
            # countdown only advances while the focus screen is shown
            self.ticker.stop()
            self.timer.state.running = False
        self.view = view
        return view

    # ── Progression ───────────────────────────────────────────

    def grant_experience(self, xp: int) -> tuple[LevelUp, ...]:
        result = apply_experience(self.user_state, xp)
        self.user_state = result.state
        self.last_level_ups = result.level_ups
        for event in result.level_ups:
            logger.info("Level up: now level %d", event.level)
        return result.level_ups

    def pop_level_ups(self) -> tuple[LevelUp, ...]:
        """Hand pending celebrations to the presentation layer exactly once."""
        events, self.last_level_ups = self.last_level_ups, ()
        return events

    # ── Focus timer ───────────────────────────────────────────

    def toggle_timer(self) -> bool:
        """Start or pause the timer; must be called from inside the event loop."""
        running = self.timer.toggle()
        if running:
            self.ticker.start()
        else:
            self.ticker.stop()
        return running

    def reset_timer(self) -> None:
        self.ticker.stop()
        self.timer.reset()

    def set_timer_minutes(self, minutes: int) -> None:
        self.ticker.stop()
        self.timer.set_custom_duration(minutes)

    # ── Snapshot ──────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        return {
            "view": self.view.value,
            "user": self.user_state.to_dict(),
            "dashboard": dashboard_summary(self.user_state, self.config.energy_level),
            "quests": {
                "state": self.quests.state.value,
                "mood": self.quests.mood,
                "items": [q.to_dict() for q in self.quests.quests],
                "allComplete": self.quests.all_complete,
            },
            "chat": {
                "pending": self.chat.pending,
                "messages": [m.to_dict() for m in self.chat.messages],
            },
            "focus": self.timer.state.to_dict(),
        }
