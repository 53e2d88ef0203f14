"""
Real Notification Service

Production implementation using:
- Twilio for SMS
- SendGrid for Email

Both SDKs are blocking; calls run in a worker thread so the event loop
(and every open chat panel) stays responsive while a provider answers.

Version: 1.0.0
"""

import asyncio
import logging
from typing import Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client as TwilioClient

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import ConfigurationError, ProviderError
from storefront.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


def _sendgrid_error_message(error: HTTPError) -> str:
    """Pull the first error message out of a SendGrid error body."""
    try:
        errors = error.to_dict.get("errors") or []
    except (ValueError, AttributeError):
        errors = []
    if errors and errors[0].get("message"):
        return errors[0]["message"]
    return "Failed to send email"


class RealNotificationService(BaseNotificationService):
    """Production notification service using Twilio and SendGrid."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        twilio_client: Optional[TwilioClient] = None,
        sendgrid_client: Optional[SendGridAPIClient] = None,
    ):
        settings = settings or get_settings()
        super().__init__(
            restaurant_name=settings.restaurant_name,
            restaurant_phone=settings.restaurant_phone,
        )

        # Initialize Twilio
        self.twilio_from_number = settings.twilio_phone_number
        if twilio_client is not None:
            self.twilio_client = twilio_client
        elif settings.twilio_configured:
            self.twilio_client = TwilioClient(
                settings.twilio_account_sid,
                settings.twilio_auth_token
            )
        else:
            self.twilio_client = None
            logger.warning("Twilio credentials not configured")

        # Initialize SendGrid
        self.sendgrid_from = From(settings.sendgrid_from_email, settings.sendgrid_from_name)
        if sendgrid_client is not None:
            self.sendgrid_client = sendgrid_client
        elif settings.sendgrid_configured:
            self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)
        else:
            self.sendgrid_client = None
            logger.warning("SendGrid credentials not configured")

        logger.info("RealNotificationService initialized")

    @property
    def provider_name(self) -> str:
        return "real"

    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Send SMS via Twilio."""
        if not self.twilio_client or not self.twilio_from_number:
            raise ConfigurationError("SMS service not configured", provider="twilio")

        try:
            result = await asyncio.to_thread(
                self.twilio_client.messages.create,
                body=message,
                from_=self.twilio_from_number,
                to=to_phone,
            )
        except TwilioRestException as e:
            logger.error(f"Twilio API error ({e.status}): {e.msg}")
            raise ProviderError(
                e.msg or "Failed to send SMS",
                status_code=e.status,
                provider="twilio",
            ) from e
        except TwilioException as e:
            logger.error(f"Twilio error: {e}")
            raise ProviderError(str(e) or "Failed to send SMS", provider="twilio") from e

        logger.info(f"SMS sent to {to_phone}: {result.sid}")

        return NotificationResult(
            success=True,
            message_id=result.sid,
            provider="twilio"
        )

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Send email via SendGrid."""
        if not self.sendgrid_client:
            raise ConfigurationError("Email service not configured", provider="sendgrid")

        message = Mail(
            from_email=self.sendgrid_from,
            to_emails=to_email,
            subject=subject,
            html_content=body_html,
            plain_text_content=body_text
        )

        try:
            response = await asyncio.to_thread(self.sendgrid_client.send, message)
        except HTTPError as e:
            error_message = _sendgrid_error_message(e)
            logger.error(f"SendGrid API error ({e.status_code}): {error_message}")
            raise ProviderError(
                error_message,
                status_code=e.status_code,
                provider="sendgrid",
            ) from e

        if response.status_code not in (200, 201, 202):
            logger.error(f"SendGrid returned {response.status_code}")
            raise ProviderError(
                "Failed to send email",
                status_code=response.status_code,
                provider="sendgrid",
            )

        message_id = response.headers.get("X-Message-Id")
        logger.info(f"Email sent to {to_email}: {response.status_code} ({message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="sendgrid"
        )

    async def health_check(self) -> bool:
        """Both providers must be configured."""
        return self.twilio_client is not None and self.sendgrid_client is not None
