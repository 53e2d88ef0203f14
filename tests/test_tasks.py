"""Tests for the status update Celery tasks (run in-process)."""
import pytest

from storefront import tasks

EMAIL_PAYLOAD = {
    "customer_name": "Priya",
    "customer_email": "priya@example.com",
    "order_number": "SB-10293",
    "status": "ready",
    "status_message": "Your order is ready",
}

SMS_PAYLOAD = {
    "customer_name": "Priya",
    "customer_phone": "+919876543210",
    "order_number": "SB-10293",
    "status": "ready",
    "status_message": "Your order is ready",
}


@pytest.fixture
def use_service(monkeypatch):
    def _use(service):
        monkeypatch.setattr(tasks, "get_notification_service", lambda: service)
        return service
    return _use


class TestStatusUpdateTasks:

    def test_email_task(self, use_service, mock_service):
        use_service(mock_service)

        result = tasks.send_status_update_email(EMAIL_PAYLOAD)

        assert result["success"] is True
        assert result["orderNumber"] == "SB-10293"
        assert result["emailId"] == mock_service.sent[0]["id"]

    def test_sms_task(self, use_service, mock_service):
        use_service(mock_service)

        result = tasks.send_status_update_sms(SMS_PAYLOAD)

        assert result["success"] is True
        assert result["messageSid"] == mock_service.sent[0]["id"]

    def test_sms_task_without_credentials(self, use_service, unconfigured_service):
        use_service(unconfigured_service)

        result = tasks.send_status_update_sms(SMS_PAYLOAD)

        assert result["success"] is False
        assert result["logged"] is True
        assert result["status_code"] == 500
        assert result["error"] == "SMS service not configured"

    def test_email_task_without_credentials(self, use_service, unconfigured_service):
        use_service(unconfigured_service)

        result = tasks.send_status_update_email(EMAIL_PAYLOAD)

        assert result["success"] is False
        assert "logged" not in result

    def test_health_check_task(self):
        assert tasks.health_check()["status"] == "healthy"
