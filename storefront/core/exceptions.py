"""
Storefront Error Hierarchy

Notification errors carry what the HTTP layer needs to build the
failure envelope: a status code and a human readable message.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotificationError(StorefrontError):
    """A status update could not be delivered."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: str = "unknown",
    ):
        super().__init__(message, status_code)
        self.provider = provider


class ConfigurationError(NotificationError):
    """Provider credentials are missing; nothing was sent."""

    status_code = 500


class ProviderError(NotificationError):
    """The provider rejected the request."""

    # Only used when the provider answered without an HTTP status
    status_code = 502


class ChatSessionNotFoundError(StorefrontError):
    """No open chat panel with the given id."""

    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Chat session {session_id} not found")
        self.session_id = session_id


class ChatSessionClosedError(StorefrontError):
    """The chat panel was closed; it no longer accepts messages."""

    status_code = 409

    def __init__(self, session_id: str):
        super().__init__(f"Chat session {session_id} is closed")
        self.session_id = session_id
