"""
Mock Notification Service

Simulates SMS and Email sending for development.
No actual messages are sent - just logged.

Version: 1.0.0
"""

import asyncio
import random
import uuid
import logging
from typing import Optional

from storefront.core.exceptions import ProviderError
from storefront.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class MockNotificationService(BaseNotificationService):
    """Mock notification service for development."""

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.1,
        max_latency: float = 0.3,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.sent: list[dict] = []
        logger.info(f"MockNotificationService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Simulate sending SMS."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock SMS failed (simulated) to {to_phone}")
            raise ProviderError("Simulated SMS failure", status_code=503, provider="mock")

        message_id = f"SM{uuid.uuid4().hex}"
        self.sent.append({"channel": "sms", "to": to_phone, "body": message, "id": message_id})
        logger.info(f"Mock SMS sent to {to_phone}: {message[:50]}... (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Simulate sending email."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock email failed (simulated) to {to_email}")
            raise ProviderError("Simulated email failure", status_code=503, provider="mock")

        message_id = f"email_mock_{uuid.uuid4().hex[:12]}"
        self.sent.append({
            "channel": "email",
            "to": to_email,
            "subject": subject,
            "body": body_html,
            "id": message_id,
        })
        logger.info(f"Mock email sent to {to_email}: {subject} (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
