"""
Core module initialization.
Exports configuration, logging utilities and the error hierarchy.
"""

from storefront.core.config import get_settings, Settings, EnvironmentMode
from storefront.core.exceptions import (
    StorefrontError,
    NotificationError,
    ConfigurationError,
    ProviderError,
    ChatSessionNotFoundError,
    ChatSessionClosedError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "StorefrontError",
    "NotificationError",
    "ConfigurationError",
    "ProviderError",
    "ChatSessionNotFoundError",
    "ChatSessionClosedError",
]
