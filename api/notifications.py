from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiosmtplib
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from jinja2 import TemplateError
from pydantic import ValidationError

from config import settings
from schemas.application import AdminNotificationPayload, ConfirmationPayload
from services.email_templates import admin_notification_subject, render_admin_notification, render_confirmation
from services.mailer import MailConfigurationError, MailHeaderError, TransportProvider, get_mail_transport
from services.sanitizer import sanitize
from services.validation import is_valid_email, missing_notification_fields, notification_format_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])

MSG_TIMEOUT = "Request timed out"
MSG_DELIVERY_FAILED = "Email service is not configured"
MSG_MOCK_DELIVERY = "Email service is unavailable; the notification was logged instead of sent"

# Errors that mean "mail did not go out" as opposed to a bad request
_DELIVERY_ERRORS = (aiosmtplib.SMTPException, OSError, MailConfigurationError, MailHeaderError)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_json_object(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


async def _send_admin_notification(request: Request, transport: TransportProvider):
    """Validate, re-sanitize and mail the admin notification. Delivery problems never become HTTP errors."""
    body = await _read_json_object(request)
    if body is None:
        return _error(400, "Request body must be a JSON object")

    missing = missing_notification_fields(body)
    if missing:
        return _error(400, f"Missing required fields: {', '.join(missing)}")

    try:
        payload = AdminNotificationPayload.model_validate(body)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        return _error(400, f"Invalid field format: {', '.join(fields)}")

    problems = notification_format_errors(
        payload.email, payload.investment_amount, payload.duration, payload.projected_return
    )
    if problems:
        return _error(400, ". ".join(problems))

    full_name = sanitize(payload.full_name)
    try:
        html = render_admin_notification(
            full_name=full_name,
            email=sanitize(payload.email),
            phone=sanitize(payload.phone),
            investment_amount=payload.investment_amount,
            duration=payload.duration,
            projected_return=payload.projected_return,
            bank_name=sanitize(payload.bank_name),
            account_number=sanitize(payload.account_number),
            payment_screenshot_url=sanitize(payload.payment_screenshot_url),
            transaction_reference=sanitize(payload.transaction_reference),
            application_id=sanitize(payload.application_id),
            app_url=settings.app_url,
        )
    except TemplateError as exc:
        logger.error("Admin notification template failed for %s: %s", payload.application_id, exc)
        return _error(400, "Could not render notification for the supplied fields")

    try:
        message_id, delivered = await transport.send_email(
            to=settings.admin_email,
            subject=admin_notification_subject(payload.investment_amount, full_name),
            html=html,
        )
    except _DELIVERY_ERRORS as exc:
        logger.error("Admin notification email failed for %s: %s", payload.application_id, exc)
        logger.warning("Email service failed, but application was saved to database")
        return {
            "success": True,
            "message": "Application saved (email notification failed)",
            "applicationId": payload.application_id,
            "warning": MSG_DELIVERY_FAILED,
        }

    logger.info("Admin notification email sent: %s", message_id)
    response = {
        "success": True,
        "message": "Admin notification sent successfully",
        "applicationId": payload.application_id,
        "messageId": message_id,
    }
    if not delivered:
        response["message"] = "Application saved (email notification logged only)"
        response["warning"] = MSG_MOCK_DELIVERY
    return response


async def _send_confirmation(request: Request, transport: TransportProvider):
    """Mail the applicant a confirmation of their submission."""
    body = await _read_json_object(request)
    if body is None or not body.get("email") or not body.get("fullName"):
        return _error(400, "Missing required fields")

    try:
        payload = ConfirmationPayload.model_validate(body)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        return _error(400, f"Invalid field format: {', '.join(fields)}")

    if not is_valid_email(payload.email):
        return _error(400, "Invalid email format")

    html = render_confirmation(
        full_name=sanitize(payload.full_name),
        investment_amount=payload.investment_amount,
        projected_return=payload.projected_return,
        application_id=sanitize(payload.application_id),
    )
    response: dict[str, Any] = {
        "success": True,
        "message": "Confirmation email queued for sending",
        "applicationId": payload.application_id,
    }
    try:
        message_id, delivered = await transport.send_email(
            to=payload.email,
            subject="Your Zteller investment application",
            html=html,
        )
    except _DELIVERY_ERRORS as exc:
        logger.error("Confirmation email to %s failed: %s", payload.email, exc)
        response["warning"] = MSG_DELIVERY_FAILED
        return response

    logger.info("Confirmation email for %s sent: %s", payload.application_id, message_id)
    if not delivered:
        response["warning"] = MSG_MOCK_DELIVERY
    return response


@router.post("/send-admin-notification")
async def send_admin_notification(request: Request, transport: TransportProvider = Depends(get_mail_transport)):
    try:
        return await asyncio.wait_for(_send_admin_notification(request, transport), timeout=settings.request_timeout)
    except asyncio.TimeoutError:
        logger.error("Admin notification request timed out after %ss", settings.request_timeout)
        return _error(408, MSG_TIMEOUT)


@router.post("/send-confirmation")
async def send_confirmation(request: Request, transport: TransportProvider = Depends(get_mail_transport)):
    try:
        return await asyncio.wait_for(_send_confirmation(request, transport), timeout=settings.request_timeout)
    except asyncio.TimeoutError:
        logger.error("Confirmation request timed out after %ss", settings.request_timeout)
        return _error(408, MSG_TIMEOUT)
