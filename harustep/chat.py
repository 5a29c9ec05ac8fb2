"""AI coach chat session: an append-only transcript with one request in flight at most."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo

from harustep.config import DEFAULT_REQUEST_TIMEOUT
from harustep.models import ChatMessage, Role
from harustep.providers import COACH_GREETING, ChatResponder

logger = logging.getLogger(__name__)

ERROR_REPLY = "A network error occurred. Please try again in a little while."


class ChatState(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"


class ChatSession:
    def __init__(
        self,
        responder: ChatResponder,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        show_errors: bool = False,
        tz: tzinfo | None = None,
    ) -> None:
        self.responder = responder
        self.timeout = timeout
        self.show_errors = show_errors
        self.tz = tz if tz is not None else ZoneInfo("UTC")
        self.state = ChatState.IDLE
        self._messages: list[ChatMessage] = [self._new(Role.MODEL, COACH_GREETING, id="welcome")]

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def pending(self) -> bool:
        return self.state == ChatState.PENDING

    async def send_message(self, text: str) -> ChatMessage | None:
        """Send one user turn. Returns the coach's reply, or None if nothing was answered."""
        if not text or not text.strip() or self.pending:
            return None

        history = tuple(self._messages)
        self._messages.append(self._new(Role.USER, text))
        self.state = ChatState.PENDING
        try:
            reply = await asyncio.wait_for(self.responder.respond(history, text), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Coach reply timed out after %ss", self.timeout)
            return self._failed()
        except asyncio.CancelledError:
            self.state = ChatState.IDLE
            raise
        except Exception as e:
            logger.warning("Coach reply failed: %s", e)
            return self._failed()

        if not isinstance(reply, str) or not reply.strip():
            logger.warning("Coach returned an empty reply")
            return self._failed()

        message = self._new(Role.MODEL, reply)
        self._messages.append(message)
        self.state = ChatState.IDLE
        return message

    def _failed(self) -> ChatMessage | None:
        self.state = ChatState.IDLE
        if not self.show_errors:
            return None
        message = self._new(Role.MODEL, ERROR_REPLY)
        self._messages.append(message)
        return message

    def _new(self, role: Role, text: str, **kwargs) -> ChatMessage:
        return ChatMessage(role=role, text=text, timestamp=datetime.now(self.tz), **kwargs)
