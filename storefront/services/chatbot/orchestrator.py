"""
Chat Panel Orchestration

Sequences customer input -> responder -> transcript, with a simulated
"typing" pause before each bot reply.

State per panel:
    IDLE --submit(non-empty)--> AWAITING_REPLY --delay elapses--> IDLE

The pause is an asyncio task so closing the panel can cancel it; a
cancelled reply is never appended to the transcript.

Version: 1.0.0
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from enum import Enum
from typing import Callable, Optional

from storefront.core.exceptions import ChatSessionClosedError, ChatSessionNotFoundError
from storefront.services.chatbot.conversation import ConversationLog, Message, Sender
from storefront.services.chatbot.rules import Responder

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hello! 👋 Welcome to Spicy Biryani! I'm here to help you with orders, "
    "menu questions, or anything else. How can I assist you today?"
)


class ConversationState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class ConversationOrchestrator:
    """
    Drives one chat panel.

    Must be used from a running event loop; submit() schedules the bot
    reply on that loop and returns immediately.

    Args:
        responder: Callable mapping customer text to a reply
        typing_delay: Seconds to wait before the bot answers
        session_id: Identifier of the owning panel
    """

    def __init__(
        self,
        responder: Optional[Callable[[str], str]] = None,
        typing_delay: float = 1.0,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.responder = responder or Responder()
        self.typing_delay = typing_delay
        self.log = ConversationLog()
        self._pending: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def is_typing(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def state(self) -> ConversationState:
        if self.is_typing:
            return ConversationState.AWAITING_REPLY
        return ConversationState.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, text: Optional[str]) -> Optional[Message]:
        """
        Accept a customer message.

        Returns:
            The appended user Message, or None when the input was blank
            or a reply is still pending.

        Raises:
            ChatSessionClosedError: If the panel was closed
        """
        loop = asyncio.get_running_loop()

        if self._closed:
            raise ChatSessionClosedError(self.session_id)

        if not text or not text.strip():
            return None

        if self.is_typing:
            logger.debug(f"Chat {self.session_id}: reply pending, ignoring submit")
            return None

        user_message = self.log.append(text.strip(), Sender.USER)
        self._pending = loop.create_task(self._reply_after_delay(user_message))
        return user_message

    async def _reply_after_delay(self, user_message: Message) -> None:
        await asyncio.sleep(self.typing_delay)
        if self._closed:
            return
        reply = self.responder(user_message.text)
        self.log.append(reply, Sender.BOT)
        logger.debug(f"Chat {self.session_id}: replied to {user_message.id}")

    async def wait_for_reply(self) -> None:
        """Wait until the pending bot reply (if any) has been appended."""
        if self._pending is None:
            return
        try:
            await asyncio.shield(self._pending)
        except asyncio.CancelledError:
            if not self._pending.cancelled():
                raise

    def close(self) -> None:
        """Discard the panel. A pending reply is cancelled."""
        if self._closed:
            return
        self._closed = True
        if self.is_typing:
            self._pending.cancel()
            logger.debug(f"Chat {self.session_id}: pending reply cancelled")


class ConversationRegistry:
    """
    Open chat panels, keyed by session id.

    Panels live only in memory. When capacity is reached the oldest
    panel is closed to make room.
    """

    def __init__(
        self,
        typing_delay: float = 1.0,
        max_sessions: int = 1000,
        contact_phone: Optional[str] = None,
    ):
        self.typing_delay = typing_delay
        self.max_sessions = max_sessions
        self._responder = Responder(contact_phone) if contact_phone else Responder()
        self._sessions: "OrderedDict[str, ConversationOrchestrator]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self) -> ConversationOrchestrator:
        while len(self._sessions) >= self.max_sessions:
            oldest_id, oldest = self._sessions.popitem(last=False)
            oldest.close()
            logger.info(f"Chat {oldest_id}: evicted (capacity {self.max_sessions})")

        conversation = ConversationOrchestrator(
            responder=self._responder,
            typing_delay=self.typing_delay,
        )
        self._sessions[conversation.session_id] = conversation
        logger.info(f"Chat {conversation.session_id}: opened")
        return conversation

    def get(self, session_id: str) -> ConversationOrchestrator:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise ChatSessionNotFoundError(session_id) from None

    def close(self, session_id: str) -> ConversationOrchestrator:
        conversation = self._sessions.pop(session_id, None)
        if conversation is None:
            raise ChatSessionNotFoundError(session_id)
        conversation.close()
        logger.info(f"Chat {session_id}: closed ({len(conversation.log)} messages)")
        return conversation

    def close_all(self) -> None:
        for conversation in self._sessions.values():
            conversation.close()
        self._sessions.clear()
