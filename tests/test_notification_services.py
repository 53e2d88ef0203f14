"""Unit tests for the notification services."""
import logging

import pytest
from python_http_client.exceptions import HTTPError
from twilio.base.exceptions import TwilioException, TwilioRestException

from storefront.core.exceptions import ConfigurationError, ProviderError
from storefront.services.notifications import RealNotificationService
from tests.conftest import FakeSendGridClient, FakeTwilioClient, make_settings

EMAIL_ARGS = dict(
    customer_name="Priya",
    customer_email="priya@example.com",
    order_number="SB-10293",
    status="delivered",
    status_message="Your order has been delivered",
)

SMS_ARGS = dict(
    customer_name="Priya",
    customer_phone="+919876543210",
    order_number="SB-10293",
    status="out_for_delivery",
    status_message="Your order is on its way!",
)


class TestMockNotificationService:
    """Tests for the opt-in mock service."""

    @pytest.mark.asyncio
    async def test_status_email_is_recorded(self, mock_service):
        result = await mock_service.send_status_update_email(**EMAIL_ARGS)

        assert result.success
        assert result.provider == "mock"
        sent = mock_service.sent[0]
        assert sent["channel"] == "email"
        assert sent["to"] == "priya@example.com"
        assert sent["subject"] == "Order Delivered - SB-10293"
        assert "#10b981" in sent["body"]

    @pytest.mark.asyncio
    async def test_status_sms_is_recorded(self, mock_service):
        result = await mock_service.send_status_update_sms(**SMS_ARGS)

        assert result.success
        assert result.message_id.startswith("SM")
        assert mock_service.sent[0]["body"].startswith("Dear Priya, Your order is on its way!")

    @pytest.mark.asyncio
    async def test_simulated_failure_raises_provider_error(self):
        from storefront.services.notifications import MockNotificationService

        service = MockNotificationService(failure_rate=1.0, min_latency=0.0, max_latency=0.0)
        with pytest.raises(ProviderError):
            await service.send_sms("+919876543210", "hi")

    @pytest.mark.asyncio
    async def test_health(self, mock_service):
        assert await mock_service.health_check()


class TestRealNotificationServiceUnconfigured:
    """Tests for missing provider credentials."""

    @pytest.mark.asyncio
    async def test_sms_raises_configuration_error_and_logs(self, unconfigured_service, caplog):
        """Test that the would-be SMS is logged and nothing is sent."""
        caplog.set_level(logging.INFO)

        with pytest.raises(ConfigurationError) as excinfo:
            await unconfigured_service.send_status_update_sms(**SMS_ARGS)

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == "SMS service not configured"
        assert unconfigured_service.twilio_client is None
        assert "SMS would have been sent to: +919876543210" in caplog.text
        assert "Dear Priya, Your order is on its way!" in caplog.text

    @pytest.mark.asyncio
    async def test_sms_requires_all_three_twilio_values(self):
        service = RealNotificationService(
            make_settings(twilio_account_sid="AC123", twilio_auth_token="token")
        )
        with pytest.raises(ConfigurationError):
            await service.send_sms("+919876543210", "hi")

    @pytest.mark.asyncio
    async def test_email_raises_configuration_error(self, unconfigured_service):
        with pytest.raises(ConfigurationError) as excinfo:
            await unconfigured_service.send_status_update_email(**EMAIL_ARGS)
        assert excinfo.value.message == "Email service not configured"

    @pytest.mark.asyncio
    async def test_health(self, unconfigured_service):
        assert not await unconfigured_service.health_check()


class TestRealNotificationServiceProviders:
    """Tests against fake Twilio / SendGrid clients."""

    def _service(self, twilio_client=None, sendgrid_client=None):
        return RealNotificationService(
            make_settings(twilio_phone_number="+15005550006"),
            twilio_client=twilio_client,
            sendgrid_client=sendgrid_client,
        )

    @pytest.mark.asyncio
    async def test_sms_sent(self):
        twilio = FakeTwilioClient()
        service = self._service(twilio_client=twilio)

        result = await service.send_status_update_sms(**SMS_ARGS)

        assert result.message_id == "SM1234567890abcdef"
        call = twilio.messages.calls[0]
        assert call["to"] == "+919876543210"
        assert call["from_"] == "+15005550006"
        assert call["body"].endswith("Thank you, Spicy Biryani!")

    @pytest.mark.asyncio
    async def test_sms_provider_rejection_keeps_status_code(self):
        error = TwilioRestException(400, "/Messages.json", msg="The 'To' number is not a valid phone number.")
        service = self._service(twilio_client=FakeTwilioClient(error=error))

        with pytest.raises(ProviderError) as excinfo:
            await service.send_status_update_sms(**SMS_ARGS)

        assert excinfo.value.status_code == 400
        assert "not a valid phone number" in excinfo.value.message
        assert excinfo.value.provider == "twilio"

    @pytest.mark.asyncio
    async def test_sms_transport_error_without_status_is_bad_gateway(self):
        service = self._service(twilio_client=FakeTwilioClient(error=TwilioException("Connection reset")))

        with pytest.raises(ProviderError) as excinfo:
            await service.send_status_update_sms(**SMS_ARGS)

        assert excinfo.value.status_code == 502
        assert excinfo.value.message == "Connection reset"

    @pytest.mark.asyncio
    async def test_email_sent(self):
        sendgrid = FakeSendGridClient()
        service = self._service(sendgrid_client=sendgrid)

        result = await service.send_status_update_email(**EMAIL_ARGS)

        assert result.message_id == "sg-message-id-1"
        assert result.provider == "sendgrid"
        mail = sendgrid.sent[0].get()
        assert mail["subject"] == "Order Delivered - SB-10293"
        assert mail["personalizations"][0]["to"][0]["email"] == "priya@example.com"

    @pytest.mark.asyncio
    async def test_email_provider_rejection_keeps_status_code(self):
        error = HTTPError(
            401,
            "Unauthorized",
            b'{"errors":[{"message":"The provided authorization grant is invalid"}]}',
            {},
        )
        service = self._service(sendgrid_client=FakeSendGridClient(error=error))

        with pytest.raises(ProviderError) as excinfo:
            await service.send_status_update_email(**EMAIL_ARGS)

        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "The provided authorization grant is invalid"

    @pytest.mark.asyncio
    async def test_email_unexpected_status(self):
        service = self._service(sendgrid_client=FakeSendGridClient(status_code=500))

        with pytest.raises(ProviderError) as excinfo:
            await service.send_email("priya@example.com", "subject", "<p>hi</p>")

        assert excinfo.value.status_code == 500
