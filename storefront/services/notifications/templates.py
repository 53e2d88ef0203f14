"""
Order Status Message Templates

Subject lines, colors and icons per order status, the HTML email body
(Jinja2) and the plain-text SMS body. Unknown statuses fall back to a
generic subject, color and icon.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
STATUS_EMAIL_TEMPLATE = "emails/status_update.html"

DEFAULT_RESTAURANT_NAME = "Spicy Biryani"
DEFAULT_RESTAURANT_PHONE = "+91 9390492316"

STATUS_SUBJECTS = {
    "confirmed": "Order Confirmed - {order_number}",
    "preparing": "Your Order is Being Prepared - {order_number}",
    "ready": "Your Order is Ready - {order_number}",
    "out_for_delivery": "Your Order is Out for Delivery - {order_number}",
    "delivered": "Order Delivered - {order_number}",
    "cancelled": "Order Cancelled - {order_number}",
}
DEFAULT_SUBJECT = "Order Update - {order_number}"

STATUS_COLORS = {
    "confirmed": "#3b82f6",
    "preparing": "#a855f7",
    "ready": "#f59e0b",
    "out_for_delivery": "#f97316",
    "delivered": "#10b981",
    "cancelled": "#ef4444",
}
DEFAULT_COLOR = "#dc2626"

STATUS_ICONS = {
    "confirmed": "✓",
    "preparing": "👨‍🍳",
    "ready": "⏰",
    "out_for_delivery": "🚚",
    "delivered": "✅",
    "cancelled": "❌",
}
DEFAULT_ICON = "📦"

# Used when a status event arrives without its own wording.
DEFAULT_STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed!",
    "preparing": "Our chefs are preparing your order.",
    "ready": "Your order is ready!",
    "out_for_delivery": "Your order is out for delivery.",
    "delivered": "Your order has been delivered. Enjoy your meal!",
    "cancelled": "Your order has been cancelled.",
}
DEFAULT_STATUS_MESSAGE = "Your order status has been updated."


@dataclass(frozen=True)
class StatusStyle:
    color: str
    icon: str


def status_subject(status: str, order_number: str) -> str:
    return STATUS_SUBJECTS.get(status, DEFAULT_SUBJECT).format(order_number=order_number)


def status_style(status: str) -> StatusStyle:
    return StatusStyle(
        color=STATUS_COLORS.get(status, DEFAULT_COLOR),
        icon=STATUS_ICONS.get(status, DEFAULT_ICON),
    )


def default_status_message(status: str) -> str:
    return DEFAULT_STATUS_MESSAGES.get(status, DEFAULT_STATUS_MESSAGE)


@lru_cache()
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def render_status_email(
    customer_name: str,
    order_number: str,
    status: str,
    status_message: str,
    restaurant_name: str = DEFAULT_RESTAURANT_NAME,
    restaurant_phone: str = DEFAULT_RESTAURANT_PHONE,
) -> str:
    """
    Render the HTML body of an order status email.

    Args:
        customer_name: Greeting name
        order_number: Human-facing order number
        status: Order status key (unknown values use the default style)
        status_message: Status sentence shown in the status box

    Returns:
        Rendered HTML document
    """
    style = status_style(status)
    template = _environment().get_template(STATUS_EMAIL_TEMPLATE)
    return template.render(
        customer_name=customer_name,
        order_number=order_number,
        status_message=status_message,
        color=style.color,
        icon=style.icon,
        restaurant_name=restaurant_name,
        restaurant_phone=restaurant_phone,
    )


def render_status_sms(
    customer_name: str,
    order_number: str,
    status_message: str,
    restaurant_name: str = DEFAULT_RESTAURANT_NAME,
) -> str:
    """Compose the single plain-text SMS for a status update."""
    return (
        f"Dear {customer_name}, {status_message} Order: {order_number}. "
        f"Track your order in real-time on our website. Thank you, {restaurant_name}!"
    )
