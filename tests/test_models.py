"""Tests for harustep/models.py: dataclass serialization."""

import pytest
from harustep.models import (
    ChatMessage,
    Difficulty,
    Quest,
    QuestProposal,
    Role,
    TimerMode,
    TimerState,
    UserState,
)


def test_user_state_seed():
    state = UserState.seed()
    assert (state.level, state.current_xp, state.next_level_xp, state.streak) == (1, 45, 100, 3)
    assert [m.score for m in state.mood_history] == [4, 5, 3, 6, 5]
    assert state.validate() == []


def test_user_state_roundtrip_camel_case():
    d = UserState.seed().to_dict()
    assert set(d) == {"level", "currentXp", "nextLevelXp", "streak", "moodHistory"}
    assert UserState.from_dict(d) == UserState.seed()


def test_user_state_from_empty_is_seed():
    assert UserState.from_dict({}) == UserState.seed()


def test_user_state_accepts_snake_case_and_ignores_unknown():
    state = UserState.from_dict({"current_xp": 12, "next_level_xp": 50, "mystery": 1})
    assert state.current_xp == 12
    assert state.next_level_xp == 50


def test_user_state_invalid():
    with pytest.raises(ValueError, match="level"):
        UserState.from_dict({"level": 0})


def test_quest_from_proposal_mints_fresh_ids():
    proposal = QuestProposal("Stretch", "Once.", Difficulty.EASY, 10)
    a, b = Quest.from_proposal(proposal), Quest.from_proposal(proposal)
    assert a.id != b.id
    assert a.completed is False
    assert a.to_dict()["difficulty"] == "EASY"


def test_quest_from_dict_normalizes_difficulty():
    quest = Quest.from_dict({"id": "q1", "title": "T", "difficulty": "hard", "xp": 40})
    assert quest.difficulty == Difficulty.HARD
    assert quest.completed is False


def test_chat_message_to_dict():
    msg = ChatMessage(role=Role.USER, text="hello")
    d = msg.to_dict()
    assert d["role"] == "user"
    assert d["text"] == "hello"
    assert ChatMessage.from_dict(d).timestamp.isoformat(timespec="seconds") == d["timestamp"]


def test_timer_state_to_dict():
    state = TimerState(minutes=4, seconds=7, mode=TimerMode.REST)
    assert state.to_dict()["display"] == "04:07"
    assert state.remaining_seconds == 247
