"""
Celery Tasks
Deliver order status notifications out of the request path.

Email and SMS are separate tasks so one channel failing never blocks
the other. Failures are reported in the task result, not retried.
"""

import asyncio
import logging
import time
from datetime import datetime

from storefront.celery_worker import celery_app
from storefront.core.exceptions import ConfigurationError, NotificationError
from storefront.services.notifications import get_notification_service

logger = logging.getLogger(__name__)


def _failure(order_number: str, error: NotificationError, **extra) -> dict:
    result = {
        "success": False,
        "error": error.message,
        "status_code": error.status_code,
        "orderNumber": order_number,
    }
    result.update(extra)
    return result


@celery_app.task(bind=True)
def send_status_update_email(self, payload: dict) -> dict:
    """
    Send the status update email for one order.

    Args:
        payload: customer_name, customer_email, order_number, status, status_message

    Returns:
        dict: Notification envelope (success, emailId or error)
    """
    order_number = payload.get("order_number", "unknown")
    logger.info(f"Task {self.request.id}: status email for order {order_number}")
    start_time = time.time()

    try:
        result = asyncio.run(get_notification_service().send_status_update_email(**payload))
    except NotificationError as e:
        logger.warning(f"Task {self.request.id}: email for order {order_number} failed - {e.message}")
        return _failure(order_number, e)

    elapsed = round(time.time() - start_time, 3)
    logger.info(f"Task {self.request.id}: email for order {order_number} sent in {elapsed}s")
    return {
        "success": True,
        "message": "Email sent successfully",
        "orderNumber": order_number,
        "emailId": result.message_id,
    }


@celery_app.task(bind=True)
def send_status_update_sms(self, payload: dict) -> dict:
    """
    Send the status update SMS for one order.

    Args:
        payload: customer_name, customer_phone, order_number, status, status_message

    Returns:
        dict: Notification envelope (success, messageSid or error)
    """
    order_number = payload.get("order_number", "unknown")
    logger.info(f"Task {self.request.id}: status SMS for order {order_number}")
    start_time = time.time()

    try:
        result = asyncio.run(get_notification_service().send_status_update_sms(**payload))
    except ConfigurationError as e:
        return _failure(order_number, e, logged=True)
    except NotificationError as e:
        logger.warning(f"Task {self.request.id}: SMS for order {order_number} failed - {e.message}")
        return _failure(order_number, e)

    elapsed = round(time.time() - start_time, 3)
    logger.info(f"Task {self.request.id}: SMS for order {order_number} sent in {elapsed}s")
    return {
        "success": True,
        "message": "SMS sent successfully",
        "orderNumber": order_number,
        "messageSid": result.message_id,
    }


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now().isoformat()
    }
