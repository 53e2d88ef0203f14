"""
FastAPI Application Entry Point

Spicy Biryani Storefront backend.
Notifications go through Twilio/SendGrid; NOTIFICATIONS_MOCK=true
switches to the mock service.

Endpoints:
    - POST /api/chat/sessions: Open a support chat panel
    - GET /api/chat/sessions/{id}: Transcript and typing indicator
    - POST /api/chat/sessions/{id}/messages: Send a customer message
    - DELETE /api/chat/sessions/{id}: Close the panel
    - POST /api/chat/reply: Stateless chatbot reply
    - POST /functions/send-status-update-email: Order status email
    - POST /functions/send-status-update-sms: Order status SMS
    - POST /api/orders/status-events: Fan out a status change to email + SMS
    - GET/POST /api/admin/...: Admin session flag
    - GET /health: System health check

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
import redis
from starlette.types import ASGIApp, Receive, Scope, Send

from storefront.core.config import get_settings, setup_logging
from storefront.core.exceptions import (
    ConfigurationError,
    NotificationError,
    StorefrontError,
)
from storefront.schemas import (
    AdminLoginRequest,
    AdminSessionResponse,
    ChatMessageResponse,
    ChatReplyRequest,
    ChatReplyResponse,
    ChatSessionResponse,
    ChatSubmitRequest,
    ChatSubmitResponse,
    HealthResponse,
    StatusChangeEvent,
    StatusChangeResponse,
    StatusUpdateEmailRequest,
    StatusUpdateSMSRequest,
)
from storefront.services.admin_session import AdminSessionStore, get_admin_session_store
from storefront.services.chatbot import (
    WELCOME_MESSAGE,
    ConversationOrchestrator,
    ConversationRegistry,
    Responder,
    get_conversation_registry,
    get_responder,
)
from storefront.services.notifications import (
    BaseNotificationService,
    get_notification_service,
)
from storefront.services.notifications.templates import default_status_message
from storefront.tasks import send_status_update_email, send_status_update_sms

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

FUNCTIONS_PREFIX = "/functions/"

# Headers every notification function response carries
FUNCTION_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


class FunctionAwareCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves some path prefixes to the routes themselves."""

    def __init__(self, app: ASGIApp, exclude_prefixes: tuple[str, ...] = (), **kwargs):
        super().__init__(app, **kwargs)
        self.exclude_prefixes = exclude_prefixes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.exclude_prefixes):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    notification_service = get_notification_service()
    logger.info(f"✅ Notification Service: {notification_service.provider_name}")

    admin_store = get_admin_session_store()
    logger.info(f"✅ Admin session: {'logged in' if admin_store.is_authenticated() else 'logged out'}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    get_conversation_registry().close_all()
    logger.info("✅ Chat sessions closed")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Spicy Biryani storefront backend: support chatbot, "
        "order status notifications and admin session."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (notification functions answer their own pre-flight)
app.add_middleware(
    FunctionAwareCORSMiddleware,
    exclude_prefixes=(FUNCTIONS_PREFIX,),
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def function_response(content: Optional[dict[str, Any]], status_code: int = 200) -> Response:
    """Response from a notification function, always with CORS headers."""
    if content is None:
        return Response(status_code=status_code, headers=FUNCTION_CORS_HEADERS)
    return JSONResponse(content=content, status_code=status_code, headers=FUNCTION_CORS_HEADERS)


def function_failure(error: str, status_code: int, **extra) -> Response:
    content = {"success": False, "error": error}
    content.update(extra)
    return function_response(content, status_code)


def serialize_conversation(conversation: ConversationOrchestrator) -> list[ChatMessageResponse]:
    return [ChatMessageResponse(**message.to_dict()) for message in conversation.log]


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🔥 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "chat": "/api/chat/sessions",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    notification_service: BaseNotificationService = Depends(get_notification_service),
    registry: ConversationRegistry = Depends(get_conversation_registry),
) -> HealthResponse:
    """Verify the Celery broker and notification providers."""

    # Check Redis
    redis_status = "healthy"
    try:
        r = redis.Redis.from_url(settings.redis_url, socket_timeout=2)
        r.ping()
        r.close()
    except redis.RedisError as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    notifications_status = "healthy" if await notification_service.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [redis_status, notifications_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        redis=redis_status,
        notifications=notifications_status,
        open_chat_sessions=len(registry),
        timestamp=datetime.now(),
    )


# =============================================================================
# SUPPORT CHATBOT ENDPOINTS
# =============================================================================

@app.post(
    "/api/chat/sessions",
    response_model=ChatSessionResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Chatbot"],
    summary="Open Chat Panel",
)
async def open_chat_session(
    registry: ConversationRegistry = Depends(get_conversation_registry),
) -> ChatSessionResponse:
    """Open a chat panel. The welcome line is shown but not logged."""
    conversation = registry.open()
    return ChatSessionResponse(
        session_id=conversation.session_id,
        state=conversation.state.value,
        typing=conversation.is_typing,
        messages=[],
        welcome=WELCOME_MESSAGE,
    )


@app.get(
    "/api/chat/sessions/{session_id}",
    response_model=ChatSessionResponse,
    tags=["Chatbot"],
)
async def get_chat_session(
    session_id: str,
    registry: ConversationRegistry = Depends(get_conversation_registry),
) -> ChatSessionResponse:
    """Transcript and typing indicator of an open panel."""
    conversation = registry.get(session_id)
    return ChatSessionResponse(
        session_id=conversation.session_id,
        state=conversation.state.value,
        typing=conversation.is_typing,
        messages=serialize_conversation(conversation),
    )


@app.post(
    "/api/chat/sessions/{session_id}/messages",
    response_model=ChatSubmitResponse,
    tags=["Chatbot"],
    summary="Send Chat Message",
)
async def submit_chat_message(
    session_id: str,
    body: ChatSubmitRequest,
    registry: ConversationRegistry = Depends(get_conversation_registry),
) -> ChatSubmitResponse:
    """
    Send a customer message.

    Blank messages, and messages sent while the bot is still typing,
    are ignored (accepted=false). The bot reply is appended after the
    typing delay; poll the session to pick it up.
    """
    conversation = registry.get(session_id)
    message = conversation.submit(body.text)
    return ChatSubmitResponse(
        session_id=conversation.session_id,
        accepted=message is not None,
        typing=conversation.is_typing,
        messages=serialize_conversation(conversation),
    )


@app.delete(
    "/api/chat/sessions/{session_id}",
    response_model=ChatSessionResponse,
    tags=["Chatbot"],
    summary="Close Chat Panel",
)
async def close_chat_session(
    session_id: str,
    registry: ConversationRegistry = Depends(get_conversation_registry),
) -> ChatSessionResponse:
    """Close the panel; a pending bot reply is dropped."""
    conversation = registry.close(session_id)
    return ChatSessionResponse(
        session_id=conversation.session_id,
        state=conversation.state.value,
        typing=False,
        messages=serialize_conversation(conversation),
    )


@app.post(
    "/api/chat/reply",
    response_model=ChatReplyResponse,
    tags=["Chatbot"],
    summary="Stateless Chatbot Reply",
)
async def chat_reply(
    body: ChatReplyRequest,
    responder: Responder = Depends(get_responder),
) -> ChatReplyResponse:
    """Classify one message and return the canned reply."""
    rule = responder.match(body.text)
    return ChatReplyResponse(
        reply=responder(body.text),
        intent=rule.name if rule else None,
    )


# =============================================================================
# NOTIFICATION FUNCTIONS
# =============================================================================

@app.options("/functions/send-status-update-email", tags=["Notifications"])
@app.options("/functions/send-status-update-sms", tags=["Notifications"])
async def notification_preflight() -> Response:
    """CORS pre-flight for the notification functions."""
    return function_response(None)


@app.post("/functions/send-status-update-email", tags=["Notifications"])
async def send_status_update_email_function(
    request: Request,
    notification_service: BaseNotificationService = Depends(get_notification_service),
) -> Response:
    """Send the order status email for one order."""
    try:
        email_data = StatusUpdateEmailRequest.model_validate(await request.json())
    except ValueError as e:
        logger.error(f"Error processing status update email: {e}")
        return function_failure(str(e), 500)

    try:
        result = await notification_service.send_status_update_email(
            customer_name=email_data.customer_name,
            customer_email=email_data.customer_email,
            order_number=email_data.order_number,
            status=email_data.status,
            status_message=email_data.status_message,
        )
    except ConfigurationError as e:
        logger.error(f"Email provider not configured: {e.message}")
        return function_failure(e.message, e.status_code)
    except NotificationError as e:
        logger.error(f"Email provider error ({e.status_code}): {e.message}")
        return function_failure(e.message, e.status_code)

    return function_response({
        "success": True,
        "message": "Email sent successfully",
        "orderNumber": email_data.order_number,
        "emailId": result.message_id,
    })


@app.post("/functions/send-status-update-sms", tags=["Notifications"])
async def send_status_update_sms_function(
    request: Request,
    notification_service: BaseNotificationService = Depends(get_notification_service),
) -> Response:
    """Send the order status SMS for one order."""
    try:
        sms_data = StatusUpdateSMSRequest.model_validate(await request.json())
    except ValueError as e:
        logger.error(f"Error processing status update SMS: {e}")
        return function_failure(str(e), 500)

    try:
        result = await notification_service.send_status_update_sms(
            customer_name=sms_data.customer_name,
            customer_phone=sms_data.customer_phone,
            order_number=sms_data.order_number,
            status=sms_data.status,
            status_message=sms_data.status_message,
        )
    except ConfigurationError as e:
        return function_failure(e.message, e.status_code, logged=True)
    except NotificationError as e:
        logger.error(f"SMS provider error ({e.status_code}): {e.message}")
        return function_failure(e.message, e.status_code)

    return function_response({
        "success": True,
        "message": "SMS sent successfully",
        "orderNumber": sms_data.order_number,
        "messageSid": result.message_id,
    })


@app.post(
    "/api/orders/status-events",
    response_model=StatusChangeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Notifications"],
    summary="Order Status Changed",
)
async def order_status_changed(event: StatusChangeEvent) -> StatusChangeResponse:
    """
    Queue customer notifications for an order status change.

    Email and SMS are queued as independent tasks; a channel without
    contact details is skipped.
    """
    if not event.customer_email and not event.customer_phone:
        raise HTTPException(
            status_code=400,
            detail="customerEmail or customerPhone is required"
        )

    payload = {
        "customer_name": event.customer_name,
        "order_number": event.order_number,
        "status": event.status.value,
        "status_message": event.status_message or default_status_message(event.status.value),
    }

    email_task_id = None
    if event.customer_email:
        email_task_id = send_status_update_email.delay(
            {**payload, "customer_email": event.customer_email}
        ).id

    sms_task_id = None
    if event.customer_phone:
        sms_task_id = send_status_update_sms.delay(
            {**payload, "customer_phone": event.customer_phone}
        ).id

    logger.info(f"Order {event.order_number} → {event.status.value}: notifications queued")

    return StatusChangeResponse(
        success=True,
        order_number=event.order_number,
        email_task_id=email_task_id,
        sms_task_id=sms_task_id,
    )


# =============================================================================
# ADMIN SESSION ENDPOINTS
# =============================================================================

@app.get("/api/admin/session", response_model=AdminSessionResponse, tags=["Admin"])
async def admin_session(
    store: AdminSessionStore = Depends(get_admin_session_store),
) -> AdminSessionResponse:
    return AdminSessionResponse(authenticated=store.is_authenticated())


@app.post("/api/admin/login", response_model=AdminSessionResponse, tags=["Admin"])
async def admin_login(
    body: AdminLoginRequest,
    store: AdminSessionStore = Depends(get_admin_session_store),
) -> AdminSessionResponse:
    if not store.login(body.username, body.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return AdminSessionResponse(authenticated=True)


@app.post("/api/admin/logout", response_model=AdminSessionResponse, tags=["Admin"])
async def admin_logout(
    store: AdminSessionStore = Depends(get_admin_session_store),
) -> AdminSessionResponse:
    store.logout()
    return AdminSessionResponse(authenticated=False)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Domain errors map to their own status code."""
    logger.warning(f"{exc.__class__.__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
