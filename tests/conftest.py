"""Shared test fixtures for HaruStep tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

import pytest
import yaml

from harustep.config import Config
from harustep.models import ChatMessage, Difficulty, QuestProposal, UserState
from harustep.router import ViewRouter


class FakeQuestGenerator:
    """Returns canned proposals, or raises/hangs when told to."""

    def __init__(self, proposals=None, error: Exception | None = None, hang: bool = False) -> None:
        self.proposals = proposals if proposals is not None else [
            QuestProposal("Make the bed", "Just pull the blanket straight.", Difficulty.EASY, 20),
            QuestProposal("Walk outside", "Five minutes around the block.", Difficulty.MEDIUM, 30),
        ]
        self.error = error
        self.hang = hang
        self.calls: list[tuple[str, int]] = []

    async def generate(self, mood: str, energy_level: int) -> list[QuestProposal]:
        self.calls.append((mood, energy_level))
        if self.hang:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return list(self.proposals)


class FakeChatResponder:
    """Echoes the user, optionally waiting on a gate or failing."""

    def __init__(self, error: Exception | None = None, gate: asyncio.Event | None = None, reply: str | None = None) -> None:
        self.error = error
        self.gate = gate
        self.reply = reply
        self.calls: list[tuple[tuple[ChatMessage, ...], str]] = []

    async def respond(self, history: Sequence[ChatMessage], text: str) -> str:
        self.calls.append((tuple(history), text))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply if self.reply is not None else f"I hear you: {text}"


@pytest.fixture
def generator() -> FakeQuestGenerator:
    return FakeQuestGenerator()


@pytest.fixture
def responder() -> FakeChatResponder:
    return FakeChatResponder()


@pytest.fixture
def config() -> Config:
    return Config(api_key="", request_timeout=0.5)


@pytest.fixture
def router(generator, responder, config) -> ViewRouter:
    return ViewRouter(UserState.seed(), generator, responder, config, tick_interval=0.01)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    """A YAML config file pointed to by HARUSTEP_CONFIG, with env overrides cleared."""
    data = {
        "model": "gemini-test",
        "energy_level": 4,
        "request_timeout": 12,
        "show_chat_errors": True,
        "timezone": "Asia/Seoul",
        "user": {"level": 3, "currentXp": 10, "nextLevelXp": 144, "streak": 7},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data, default_flow_style=False), encoding="utf-8")
    monkeypatch.setenv("HARUSTEP_CONFIG", str(path))
    for var in ("GEMINI_API_KEY", "API_KEY", "HARUSTEP_MODEL", "HARUSTEP_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return path
