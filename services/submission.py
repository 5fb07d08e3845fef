"""
Submission pipeline: validate, encode the receipt, sanitize, persist, then
notify the admin on a best-effort basis.

Each stage is awaited in order. Nothing is written until validation and
receipt encoding have succeeded, and nothing after the write can undo it.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import InvestmentApplication
from services.applications import create_application
from services.forms import WizardForm
from services.projection import DEFAULT_MONTHLY_RATE
from services.receipts import DEFAULT_READ_TIMEOUT, ReceiptError, encode_receipt
from services.sanitizer import sanitize
from services.validation import validate_form, validate_step
from utils.errors import log_error, sanitize_error_message

logger = logging.getLogger(__name__)

SUBMISSION_CONTEXT = "Application Form Submission"


class Notifier(Protocol):
    async def notify(self, payload: dict[str, Any]) -> bool: ...


class SubmissionError(Exception):
    """A submission attempt failed; str(exc) is safe to show the applicant."""

    def __init__(self, message: str, field_errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = field_errors or {}


class FormValidationError(SubmissionError):
    pass


class PersistenceError(SubmissionError):
    pass


class SubmissionPipeline:
    def __init__(
        self,
        session: AsyncSession,
        notifier: Optional[Notifier] = None,
        monthly_rate: float = DEFAULT_MONTHLY_RATE,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ):
        self.session = session
        self.notifier = notifier
        self.monthly_rate = monthly_rate
        self.read_timeout = read_timeout

    async def submit(self, form: WizardForm, step: int) -> InvestmentApplication:
        check = validate_step(step, form)
        if not check.valid:
            raise FormValidationError("Please correct the errors below", check.field_errors)

        errors = validate_form(form)
        if errors:
            raise FormValidationError(". ".join(errors))

        try:
            screenshot_url = await encode_receipt(form.payment_screenshot, timeout=self.read_timeout)
        except ReceiptError as exc:
            logger.info("Receipt rejected for %s: %s", form.email, exc)
            raise SubmissionError(str(exc), {"paymentScreenshot": str(exc)}) from exc

        clean = {name: sanitize(value) for name, value in form.text_values().items()}
        investment_amount = form.final_amount
        projected = form.projected_return(self.monthly_rate)

        try:
            app = await create_application(self.session, {
                **clean,
                "investment_amount": investment_amount,
                "duration": form.duration,
                "projected_return": projected,
                "payment_screenshot_url": screenshot_url,
            })
        except SQLAlchemyError as exc:
            await self.session.rollback()
            log_error(exc, SUBMISSION_CONTEXT)
            raise PersistenceError(sanitize_error_message(exc)) from exc

        logger.info("Investment application submitted: %s", app.id)
        await self._notify(app)
        return app

    async def _notify(self, app: InvestmentApplication) -> None:
        if self.notifier is None:
            return
        payload = {
            "fullName": app.full_name,
            "email": app.email,
            "phone": app.phone,
            "investmentAmount": app.investment_amount,
            "duration": app.duration,
            "projectedReturn": app.projected_return,
            "bankName": app.bank_name,
            "accountNumber": app.account_number,
            "paymentScreenshotURL": app.payment_screenshot_url,
            "transactionReference": app.transaction_reference,
            "applicationId": app.id,
        }
        try:
            await self.notifier.notify(payload)
        except Exception as exc:  # the record is stored; a notifier bug must not surface
            logger.error("Admin notification for %s failed: %s", app.id, exc, exc_info=True)
