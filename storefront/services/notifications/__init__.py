"""
Notification Service Factory

Returns the Real notification service, or the Mock one when
NOTIFICATIONS_MOCK is set.

Version: 1.0.0
"""

import logging
from functools import lru_cache

from storefront.core.config import get_settings
from storefront.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)
from storefront.services.notifications.mock import MockNotificationService
from storefront.services.notifications.real import RealNotificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_service() -> BaseNotificationService:
    """Get the configured notification service."""
    settings = get_settings()

    if settings.notifications_mock:
        logger.info("Notification Service: Using MockNotificationService (NOTIFICATIONS_MOCK)")
        return MockNotificationService(
            failure_rate=settings.notifications_mock_failure_rate,
            restaurant_name=settings.restaurant_name,
            restaurant_phone=settings.restaurant_phone,
        )
    else:
        logger.info(f"Notification Service: Using RealNotificationService ({settings.env_mode.value} mode)")
        return RealNotificationService(settings)


def reset_notification_service() -> None:
    """Clear the cached service instance."""
    get_notification_service.cache_clear()


__all__ = [
    "get_notification_service",
    "reset_notification_service",
    "BaseNotificationService",
    "NotificationResult",
    "MockNotificationService",
    "RealNotificationService",
]
