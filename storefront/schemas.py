"""
Pydantic Schemas for Request/Response Validation

Covers:
- Support chatbot panel and stateless replies
- Order status notification functions (email / SMS)
- Order status change events
- Admin session flag

Notification payloads use camelCase on the wire (customerName,
orderNumber, ...) to match the storefront frontend.

Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatusEnum(str, Enum):
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# CHATBOT SCHEMAS
# =============================================================================

class ChatMessageResponse(BaseModel):
    id: str
    text: str
    sender: str
    timestamp: datetime


class ChatSubmitRequest(BaseModel):
    """Customer message typed into the chat panel."""
    text: str = Field(default="", max_length=2000, examples=["Where is my order?"])


class ChatSessionResponse(CamelModel):
    session_id: str
    state: str
    typing: bool
    messages: List[ChatMessageResponse] = Field(default_factory=list)
    welcome: Optional[str] = None


class ChatSubmitResponse(CamelModel):
    session_id: str
    accepted: bool
    typing: bool
    messages: List[ChatMessageResponse] = Field(default_factory=list)


class ChatReplyRequest(BaseModel):
    text: str = Field(..., max_length=2000, examples=["What's on the menu?"])


class ChatReplyResponse(BaseModel):
    reply: str
    intent: Optional[str] = Field(None, description="Matched intent, null for the fallback")


# =============================================================================
# NOTIFICATION SCHEMAS
# =============================================================================

class StatusUpdateEmailRequest(CamelModel):
    """Payload of the send-status-update-email function."""
    customer_name: str = Field(..., min_length=1, max_length=100, examples=["Priya"])
    customer_email: str = Field(..., min_length=3, max_length=254, examples=["priya@example.com"])
    order_number: str = Field(..., min_length=1, max_length=50, examples=["SB-10293"])
    status: str = Field(..., min_length=1, max_length=50, examples=["delivered"])
    status_message: str = Field(..., max_length=500, examples=["Your order has been delivered"])

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("customerEmail must be an email address")
        return v.strip()


class StatusUpdateSMSRequest(CamelModel):
    """Payload of the send-status-update-sms function."""
    customer_name: str = Field(..., min_length=1, max_length=100, examples=["Priya"])
    customer_phone: str = Field(..., min_length=5, max_length=20, examples=["+919876543210"])
    order_number: str = Field(..., min_length=1, max_length=50, examples=["SB-10293"])
    status: str = Field(..., min_length=1, max_length=50, examples=["out_for_delivery"])
    status_message: str = Field(..., max_length=500, examples=["Your order is on its way!"])


class StatusChangeEvent(CamelModel):
    """An order changed status; fan out to email and SMS."""
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_email: Optional[str] = Field(None, max_length=254)
    customer_phone: Optional[str] = Field(None, max_length=20)
    order_number: str = Field(..., min_length=1, max_length=50)
    status: OrderStatusEnum
    status_message: Optional[str] = Field(None, max_length=500)


class StatusChangeResponse(CamelModel):
    success: bool
    order_number: str
    email_task_id: Optional[str] = None
    sms_task_id: Optional[str] = None


# =============================================================================
# ADMIN SCHEMAS
# =============================================================================

class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=200)


class AdminSessionResponse(BaseModel):
    authenticated: bool


# =============================================================================
# SYSTEM SCHEMAS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    redis: str
    notifications: str
    open_chat_sessions: int
    timestamp: datetime
