"""Unit tests for order status message templates."""
import pytest

from storefront.services.notifications.templates import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    STATUS_COLORS,
    STATUS_ICONS,
    default_status_message,
    render_status_email,
    render_status_sms,
    status_style,
    status_subject,
)


class TestStatusSubject:
    """Tests for email subject lines."""

    @pytest.mark.parametrize(
        "status, subject",
        [
            ("confirmed", "Order Confirmed - SB-1"),
            ("preparing", "Your Order is Being Prepared - SB-1"),
            ("ready", "Your Order is Ready - SB-1"),
            ("out_for_delivery", "Your Order is Out for Delivery - SB-1"),
            ("delivered", "Order Delivered - SB-1"),
            ("cancelled", "Order Cancelled - SB-1"),
        ],
    )
    def test_known_statuses(self, status, subject):
        assert status_subject(status, "SB-1") == subject

    def test_unknown_status_uses_generic_subject(self):
        assert status_subject("refunded", "SB-1") == "Order Update - SB-1"


class TestStatusStyle:
    """Tests for per-status color and icon."""

    def test_delivered(self):
        style = status_style("delivered")
        assert style.color == "#10b981"
        assert style.icon == "✅"

    def test_unknown_status_uses_fallback(self):
        style = status_style("lost_in_space")
        assert style.color == DEFAULT_COLOR == "#dc2626"
        assert style.icon == DEFAULT_ICON == "📦"

    def test_every_status_has_color_and_icon(self):
        assert set(STATUS_COLORS) == set(STATUS_ICONS)


class TestRenderStatusEmail:
    """Tests for the HTML email body."""

    def test_delivered_email_uses_delivered_style(self):
        """Test that delivered renders its own color and icon, not the fallback."""
        html = render_status_email(
            customer_name="Priya",
            order_number="SB-10293",
            status="delivered",
            status_message="Your order has been delivered",
        )

        assert "border-left: 4px solid #10b981" in html
        assert "color: #10b981" in html
        assert "✅" in html
        assert "border-left: 4px solid #dc2626" not in html
        assert "📦" not in html

    def test_unknown_status_email_uses_fallback_style(self):
        html = render_status_email(
            customer_name="Priya",
            order_number="SB-10293",
            status="refunded",
            status_message="Your refund is on its way",
        )

        assert "border-left: 4px solid #dc2626" in html
        assert "📦" in html

    def test_email_contents(self):
        html = render_status_email(
            customer_name="Priya",
            order_number="SB-10293",
            status="ready",
            status_message="Your order is ready",
            restaurant_name="Spicy Biryani",
            restaurant_phone="+91 9390492316",
        )

        assert "Dear Priya," in html
        assert "SB-10293" in html
        assert "Your order is ready. You can track your order" in html
        assert "Need help? Contact us at +91 9390492316" in html

    def test_customer_fields_are_escaped(self):
        html = render_status_email(
            customer_name="<script>alert(1)</script>",
            order_number="SB-1",
            status="ready",
            status_message="ready",
        )
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestRenderStatusSms:
    """Tests for the SMS body."""

    def test_template(self):
        message = render_status_sms(
            customer_name="Priya",
            order_number="SB-10293",
            status_message="Your order is out for delivery!",
        )
        assert message == (
            "Dear Priya, Your order is out for delivery! Order: SB-10293. "
            "Track your order in real-time on our website. Thank you, Spicy Biryani!"
        )


class TestDefaultStatusMessage:

    def test_known_and_unknown(self):
        assert default_status_message("delivered").startswith("Your order has been delivered")
        assert default_status_message("weird") == "Your order status has been updated."
