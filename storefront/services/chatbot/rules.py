"""
Support Chatbot Responder

Maps one free-text customer message to exactly one canned reply.
Rules are an explicit ordered table; the first rule whose pattern
matches the normalized message wins. Unmatched messages get a fallback
reply that quotes the customer's original text.

Usage:
    from storefront.services.chatbot.rules import classify_and_reply

    reply = classify_and_reply("Where is my order?")
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

DEFAULT_CONTACT_PHONE = "+91 9390492316"

FALLBACK_TEMPLATE = (
    'I understand you\'re asking about: "{message}". Let me help! 🤔 '
    "For specific questions about orders, please contact us at {phone}. "
    "For menu items, check out our menu section. How else can I assist you?"
)


@dataclass(frozen=True)
class IntentRule:
    """A named (pattern, reply) pair."""
    name: str
    pattern: re.Pattern
    reply: str

    def matches(self, normalized: str) -> bool:
        return self.pattern.search(normalized) is not None


def _rule(name: str, pattern: str, reply: str) -> IntentRule:
    return IntentRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), reply=reply)


def build_rules(contact_phone: str = DEFAULT_CONTACT_PHONE) -> tuple[IntentRule, ...]:
    """
    Build the ordered intent table.

    Order is priority: delivery time is checked before location, so
    "when do you deliver to my area" is answered as a delivery-time question.

    Args:
        contact_phone: Phone number quoted in replies that redirect to staff

    Returns:
        Tuple of IntentRule in evaluation order
    """
    return (
        _rule(
            "greeting",
            r"^(hi|hello|hey|greetings)",
            "Hello! 👋 Thank you for contacting Spicy Biryani! How can I help you today?",
        ),
        _rule(
            "menu",
            r"(menu|what do you serve|what.*available|items|dishes)",
            "We serve delicious biryanis! 🍛 Our menu includes Chicken Biryani, Mutton Biryani, "
            "Veg Biryani, and more. You can browse our full menu on the website. "
            "Would you like to know about a specific dish?",
        ),
        _rule(
            "order_tracking",
            r"(track|order.*status|where.*order|my order)",
            "To track your order, click on the package icon (📦) in the navigation bar and enter "
            "your order number. You'll get real-time updates on your order status!",
        ),
        _rule(
            "delivery_time",
            r"(delivery|time|how long|when|eta|estimated)",
            "Our standard delivery time is 30-45 minutes! ⏱️ We prepare everything fresh when "
            "you order. You'll get updates as your order progresses.",
        ),
        _rule(
            "price",
            r"(price|cost|how much|rate|pricing)",
            "Our prices are competitive and listed on the menu! 💰 Prices vary by dish - check "
            "out our menu section for detailed pricing. Most biryanis range from ₹150-350.",
        ),
        _rule(
            "location",
            r"(address|location|where|deliver|area)",
            "We deliver to various areas! 📍 Please enter your delivery address during checkout "
            f"to see if we deliver to your location. For more details, contact us at {contact_phone}.",
        ),
        _rule(
            "contact",
            r"(contact|phone|number|call|reach|support)",
            f"You can reach us at {contact_phone} 📞. We're here to help with orders, inquiries, "
            "or any questions you might have!",
        ),
        _rule(
            "payment",
            r"(payment|pay|cod|card|upi|online payment)",
            "We accept Cash on Delivery (COD), UPI, and card payments! 💳 Choose your preferred "
            "payment method during checkout.",
        ),
        _rule(
            "ordering",
            r"(order|how.*order|place order|buy)",
            "Ordering is easy! 🛒 Add items to your cart, click checkout, fill in your details, "
            "and confirm. You'll receive a confirmation with your order number for tracking!",
        ),
        _rule(
            "special_request",
            r"(spicy|mild|extra|special|request|modification|customize)",
            "We'd love to customize your order! 🌶️ Please mention any special requests in the "
            "notes section during checkout, and we'll do our best to accommodate them.",
        ),
        _rule(
            "hours",
            r"(open|hours|timing|when.*open|close|time)",
            f"We're open daily! ⏰ Please contact us at {contact_phone} for our exact operating "
            "hours and availability.",
        ),
        _rule(
            "complaint",
            r"(problem|issue|complaint|wrong|mistake|error|not satisfied)",
            f"I'm sorry to hear about the issue! 😔 Please contact us immediately at {contact_phone} "
            "and we'll resolve it right away. Your satisfaction is our priority!",
        ),
        _rule(
            "thanks",
            r"(thank|thanks|appreciate)",
            "You're very welcome! 😊 We're happy to help. Is there anything else you'd like to know?",
        ),
    )


DEFAULT_RULES = build_rules()


def normalize(message: str) -> str:
    return message.strip().lower()


def match_intent(
    message: str,
    rules: Sequence[IntentRule] = DEFAULT_RULES,
) -> Optional[IntentRule]:
    """Return the first rule matching the message, or None."""
    normalized = normalize(message)
    for rule in rules:
        if rule.matches(normalized):
            return rule
    return None


def fallback_reply(message: str, contact_phone: str = DEFAULT_CONTACT_PHONE) -> str:
    """Reply for messages no rule understands. Quotes the message as given."""
    return FALLBACK_TEMPLATE.format(message=message, phone=contact_phone)


def classify_and_reply(
    message: str,
    rules: Sequence[IntentRule] = DEFAULT_RULES,
    contact_phone: str = DEFAULT_CONTACT_PHONE,
) -> str:
    """
    Classify a customer message and return the canned reply.

    Args:
        message: Raw text typed by the customer
        rules: Ordered intent table (first match wins)
        contact_phone: Phone number quoted by the fallback reply

    Returns:
        The reply of the first matching rule, or the fallback reply
    """
    rule = match_intent(message, rules)
    if rule is None:
        return fallback_reply(message, contact_phone)
    return rule.reply


class Responder:
    """Responder bound to one rule table and contact channel."""

    def __init__(self, contact_phone: str = DEFAULT_CONTACT_PHONE):
        self.contact_phone = contact_phone
        self.rules = (
            DEFAULT_RULES if contact_phone == DEFAULT_CONTACT_PHONE
            else build_rules(contact_phone)
        )

    def __call__(self, message: str) -> str:
        return classify_and_reply(message, self.rules, self.contact_phone)

    def match(self, message: str) -> Optional[IntentRule]:
        return match_intent(message, self.rules)
