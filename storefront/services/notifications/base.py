"""
Notification Service Abstract Base Class

Defines the interface for sending SMS and Email notifications and the
order status update flow built on top of it.
Supports both Mock (development) and Real (production) implementations.

Failures are raised, not returned:
    - ConfigurationError: provider credentials missing, nothing sent
    - ProviderError: provider rejected the request

Version: 1.0.0
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from storefront.core.exceptions import ConfigurationError
from storefront.services.notifications.templates import (
    DEFAULT_RESTAURANT_NAME,
    DEFAULT_RESTAURANT_PHONE,
    render_status_email,
    render_status_sms,
    status_subject,
)

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    """Result from a delivered notification."""
    success: bool
    message_id: Optional[str] = None
    provider: str = "unknown"


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    def __init__(
        self,
        restaurant_name: str = DEFAULT_RESTAURANT_NAME,
        restaurant_phone: str = DEFAULT_RESTAURANT_PHONE,
    ):
        self.restaurant_name = restaurant_name
        self.restaurant_phone = restaurant_phone

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Send an SMS message."""
        pass

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Send an email."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service readiness."""
        pass

    async def send_status_update_email(
        self,
        customer_name: str,
        customer_email: str,
        order_number: str,
        status: str,
        status_message: str,
    ) -> NotificationResult:
        """Render and send the order status email."""
        subject = status_subject(status, order_number)
        body_html = render_status_email(
            customer_name=customer_name,
            order_number=order_number,
            status=status,
            status_message=status_message,
            restaurant_name=self.restaurant_name,
            restaurant_phone=self.restaurant_phone,
        )

        result = await self.send_email(
            to_email=customer_email,
            subject=subject,
            body_html=body_html,
        )
        logger.info(f"Status update email sent for order {order_number} ({status}): {result.message_id}")
        return result

    async def send_status_update_sms(
        self,
        customer_name: str,
        customer_phone: str,
        order_number: str,
        status: str,
        status_message: str,
    ) -> NotificationResult:
        """
        Compose and send the order status SMS.

        When the SMS provider is not configured the message that would
        have been sent is logged before the error propagates.
        """
        message = render_status_sms(
            customer_name=customer_name,
            order_number=order_number,
            status_message=status_message,
            restaurant_name=self.restaurant_name,
        )

        try:
            result = await self.send_sms(customer_phone, message)
        except ConfigurationError:
            logger.error("SMS provider credentials not configured")
            logger.info(f"SMS would have been sent to: {customer_phone}")
            logger.info(f"Message: {message}")
            raise

        logger.info(f"Status update SMS sent for order {order_number} ({status}): {result.message_id}")
        return result
