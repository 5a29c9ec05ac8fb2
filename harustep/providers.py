"""Quest generation and chat coaching collaborators.

Two implementations of each: Gemini-backed (google-genai SDK) and offline.
The choice is made once, from the configured credential, by
select_collaborators(). Sessions never check for a key themselves.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, Sequence

from google import genai
from google.genai import types

from harustep.config import Config
from harustep.models import ChatMessage, Difficulty, QuestProposal

logger = logging.getLogger(__name__)

MAX_QUESTS = 5


class CollaboratorError(Exception):
    """A quest generator or chat responder call failed."""


class MalformedResponse(CollaboratorError):
    """The collaborator answered, but not in the expected shape."""


# ── Prompts ───────────────────────────────────────────────────


COACH_PERSONA = """You are "Haru", the AI coach of the HaruStep app.
You support people who feel withdrawn, isolated or drained with warm comfort
and very small nudges.

Principles:
1. Never push, scold or pressure.
2. Lead with empathy rather than vague "you can do it" cheering.
3. When study or job hunting comes up, suggest one action that takes about
   five minutes today, not a grand plan.
4. Keep a soft, kind tone.
5. If the user is struggling, tell them it is fine to just rest. Rest is
   part of growing too."""

COACH_GREETING = (
    "Hi, I'm Haru, a coach cheering on your small steps. "
    "How are you feeling today? I'm happy to listen to anything."
)

OFFLINE_REPLY = "The coach is offline right now because no API key is set. Please try again later."
EMPTY_REPLY = "Sorry, it's a little hard for me to answer right now. Could you talk to me again in a moment?"


def quest_prompt(mood: str, energy_level: int) -> str:
    return (
        f'The user\'s current mood is "{mood}" and their energy level is '
        f"{energy_level} out of 10.\n"
        "They may be socially isolated or feeling listless.\n"
        'Suggest 3 "micro quests" that are never burdensome and give a tiny '
        "sense of achievement.\n\n"
        'Examples: "Open the window and take 3 deep breaths", "Drink a glass '
        'of water", "Listen to one favourite song", "Throw away one piece of '
        'trash from the desk".\n\n'
        'If they want to study, suggest a very easy start such as "Just open '
        'a book to one page".'
    )


QUEST_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "description": types.Schema(type=types.Type.STRING),
            "difficulty": types.Schema(
                type=types.Type.STRING,
                enum=[d.value for d in Difficulty],
            ),
            "xp": types.Schema(type=types.Type.INTEGER),
        },
        required=["title", "description", "difficulty", "xp"],
    ),
)


# ── Parsing ───────────────────────────────────────────────────


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_quest_proposals(text: str | None) -> list[QuestProposal]:
    """Parse a JSON quest list. Raises MalformedResponse on any schema mismatch."""
    if not text or not text.strip():
        raise MalformedResponse("Empty quest response")
    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Quest response is not JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedResponse("Quest response must be a JSON array")
    if len(data) > MAX_QUESTS:
        raise MalformedResponse(f"Expected at most {MAX_QUESTS} quests, got {len(data)}")

    proposals = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedResponse(f"Quest #{i} is not an object")
        title = item.get("title")
        description = item.get("description")
        if not isinstance(title, str) or not title.strip():
            raise MalformedResponse(f"Quest #{i} has no title")
        if not isinstance(description, str):
            raise MalformedResponse(f"Quest #{i} has no description")
        try:
            difficulty = Difficulty(str(item.get("difficulty", "")).upper())
        except ValueError as e:
            raise MalformedResponse(f"Quest #{i} has invalid difficulty: {item.get('difficulty')!r}") from e
        xp = item.get("xp")
        if isinstance(xp, bool) or not isinstance(xp, int) or xp <= 0:
            raise MalformedResponse(f"Quest #{i} has invalid xp: {xp!r}")
        proposals.append(QuestProposal(title.strip(), description.strip(), difficulty, xp))
    return proposals


def fallback_quests() -> list[QuestProposal]:
    return [
        QuestProposal("Drink a glass of water", "Wake your body up with a cool glass of water.", Difficulty.EASY, 10),
        QuestProposal("Open a window", "Breathe some fresh air for just one minute.", Difficulty.EASY, 15),
        QuestProposal("One stretch", "Give yourself one big, long stretch.", Difficulty.EASY, 10),
    ]


def _check_energy(energy_level: int) -> None:
    if not 0 <= energy_level <= 10:
        raise ValueError(f"energy_level must be 0-10, got {energy_level}")


# ── Interfaces ────────────────────────────────────────────────


class QuestGenerator(Protocol):
    async def generate(self, mood: str, energy_level: int) -> list[QuestProposal]: ...


class ChatResponder(Protocol):
    async def respond(self, history: Sequence[ChatMessage], text: str) -> str: ...


# ── Gemini ────────────────────────────────────────────────────


class GeminiQuestGenerator:
    def __init__(self, client: genai.Client, model: str) -> None:
        self.client = client
        self.model = model

    async def generate(self, mood: str, energy_level: int) -> list[QuestProposal]:
        _check_energy(energy_level)
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=quest_prompt(mood, energy_level),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=QUEST_SCHEMA,
                ),
            )
        except Exception as e:
            raise CollaboratorError(f"Quest generation failed: {e}") from e
        return parse_quest_proposals(response.text)


class GeminiChatResponder:
    def __init__(self, client: genai.Client, model: str, persona: str = COACH_PERSONA) -> None:
        self.client = client
        self.model = model
        self.persona = persona

    @staticmethod
    def to_contents(history: Sequence[ChatMessage]) -> list[types.Content]:
        return [
            types.Content(role=msg.role.value, parts=[types.Part(text=msg.text)])
            for msg in history
        ]

    async def respond(self, history: Sequence[ChatMessage], text: str) -> str:
        try:
            chat = self.client.aio.chats.create(
                model=self.model,
                history=self.to_contents(history),
                config=types.GenerateContentConfig(system_instruction=self.persona),
            )
            response = await chat.send_message(text)
        except Exception as e:
            raise CollaboratorError(f"Chat reply failed: {e}") from e
        reply = response.text
        if not isinstance(reply, str) or not reply.strip():
            raise MalformedResponse("Empty chat reply")
        return reply.strip()


# ── Offline ───────────────────────────────────────────────────


class OfflineQuestGenerator:
    async def generate(self, mood: str, energy_level: int) -> list[QuestProposal]:
        _check_energy(energy_level)
        return fallback_quests()


class OfflineChatResponder:
    async def respond(self, history: Sequence[ChatMessage], text: str) -> str:
        return OFFLINE_REPLY


def select_collaborators(config: Config, client: Any = None) -> tuple[QuestGenerator, ChatResponder]:
    """Pick Gemini collaborators when a credential is configured, offline ones otherwise."""
    if not config.has_credential:
        logger.warning("No Gemini API key configured; using built-in quests and offline coach")
        return OfflineQuestGenerator(), OfflineChatResponder()
    if client is None:
        client = genai.Client(api_key=config.api_key)
    logger.info("Using Gemini model %s", config.model)
    return GeminiQuestGenerator(client, config.model), GeminiChatResponder(client, config.model)
