"""
                        Services Module

Contains all business logic services.
Notification delivery has Mock (development) and Real (production)
implementations selected by ENV_MODE.

Services:
    - chatbot: rule-based support responder and chat panel orchestration
    - notifications: order status email (SendGrid) and SMS (Twilio)
    - admin_session: persisted admin login flag
"""

from storefront.services.admin_session import AdminSessionStore

__all__ = ["AdminSessionStore"]
