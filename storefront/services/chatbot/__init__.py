"""
Support Chatbot

Rule-based responder plus the chat panel orchestration around it.

Usage:
    from storefront.services.chatbot import get_conversation_registry

    registry = get_conversation_registry()
    panel = registry.open()
    panel.submit("What's on the menu?")
"""

import logging
from functools import lru_cache

from storefront.core.config import get_settings
from storefront.services.chatbot.conversation import ConversationLog, Message, Sender
from storefront.services.chatbot.orchestrator import (
    WELCOME_MESSAGE,
    ConversationOrchestrator,
    ConversationRegistry,
    ConversationState,
)
from storefront.services.chatbot.rules import (
    DEFAULT_RULES,
    IntentRule,
    Responder,
    build_rules,
    classify_and_reply,
    fallback_reply,
    match_intent,
)

logger = logging.getLogger(__name__)


@lru_cache()
def get_conversation_registry() -> ConversationRegistry:
    """Get the process-wide registry of open chat panels."""
    settings = get_settings()
    logger.info(
        f"Chatbot: typing delay {settings.chat_typing_delay_seconds}s, "
        f"max {settings.chat_max_sessions} sessions"
    )
    return ConversationRegistry(
        typing_delay=settings.chat_typing_delay_seconds,
        max_sessions=settings.chat_max_sessions,
        contact_phone=settings.restaurant_phone,
    )


@lru_cache()
def get_responder() -> Responder:
    """Get the responder bound to the configured contact phone."""
    return Responder(get_settings().restaurant_phone)


def reset_conversation_registry() -> None:
    """Close every open panel and clear the cached registry."""
    if get_conversation_registry.cache_info().currsize:
        get_conversation_registry().close_all()
    get_conversation_registry.cache_clear()
    get_responder.cache_clear()


__all__ = [
    "get_conversation_registry",
    "get_responder",
    "reset_conversation_registry",
    "ConversationLog",
    "ConversationOrchestrator",
    "ConversationRegistry",
    "ConversationState",
    "DEFAULT_RULES",
    "IntentRule",
    "Message",
    "Responder",
    "Sender",
    "WELCOME_MESSAGE",
    "build_rules",
    "classify_and_reply",
    "fallback_reply",
    "match_intent",
]
