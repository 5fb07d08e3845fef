"""
Five-step application wizard: details -> bank -> payment -> review -> success.

Forward moves are gated by the current step's validation. Review trusts the
earlier gating; submitting from review hands the form to the submission
pipeline and, on success, ends in the terminal success step.
"""
from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields
from enum import IntEnum
from typing import Any, Optional

from models import InvestmentApplication
from services.forms import WizardForm
from services.receipts import MAX_RECEIPT_BYTES, MSG_TOO_LARGE, ReceiptFile
from services.submission import SubmissionError, SubmissionPipeline
from services.validation import validate_step

logger = logging.getLogger(__name__)

MSG_CORRECT_ERRORS = "Please correct the errors below"
# The receipt goes through attach_receipt so its size is checked on selection
_EDITABLE_FIELDS = frozenset(f.name for f in dataclass_fields(WizardForm)) - {"payment_screenshot"}


class WizardStep(IntEnum):
    DETAILS = 1
    BANK = 2
    PAYMENT = 3
    REVIEW = 4
    SUCCESS = 5


class WizardTransitionError(ValueError):
    pass


class ApplicationWizard:
    def __init__(self, form: Optional[WizardForm] = None, step: WizardStep = WizardStep.DETAILS):
        self.form = form or WizardForm()
        self.step = WizardStep(step)
        self.field_errors: dict[str, str] = {}
        self.error = ""
        self.loading = False
        self.application_id: Optional[str] = None
        self.failure: Optional[SubmissionError] = None

    @property
    def is_complete(self) -> bool:
        return self.step is WizardStep.SUCCESS

    def update(self, **fields: Any) -> None:
        if self.is_complete:
            raise WizardTransitionError("Application already submitted")
        for name, value in fields.items():
            if name not in _EDITABLE_FIELDS:
                raise AttributeError(f"Unknown form field: {name}")
            setattr(self.form, name, value)

    def attach_receipt(self, receipt: ReceiptFile) -> bool:
        """Attach a receipt unless it is over the size limit; an earlier attachment survives a rejection."""
        if receipt.size > MAX_RECEIPT_BYTES:
            self.field_errors["paymentScreenshot"] = MSG_TOO_LARGE
            return False
        self.error = ""
        self.field_errors.pop("paymentScreenshot", None)
        self.form.payment_screenshot = receipt
        return True

    def validate(self) -> bool:
        result = validate_step(self.step, self.form)
        self.field_errors = result.field_errors
        self.error = "" if result.valid else MSG_CORRECT_ERRORS
        return result.valid

    def next(self) -> bool:
        if self.step >= WizardStep.REVIEW:
            raise WizardTransitionError(f"Cannot advance from step {int(self.step)}")
        if not self.validate():
            return False
        self.step = WizardStep(self.step + 1)
        return True

    def back(self) -> None:
        if not WizardStep.BANK <= self.step <= WizardStep.REVIEW:
            raise WizardTransitionError(f"Cannot go back from step {int(self.step)}")
        self.step = WizardStep(self.step - 1)
        self.error = ""

    async def submit(self, pipeline: SubmissionPipeline) -> Optional[InvestmentApplication]:
        """Run the pipeline from review. Returns the stored record, or None with error set."""
        if self.step is not WizardStep.REVIEW:
            raise WizardTransitionError("Applications can only be submitted from the review step")
        if not self.validate():
            return None

        self.loading = True
        self.error = ""
        self.failure = None
        try:
            app = await pipeline.submit(self.form, self.step)
        except SubmissionError as exc:
            logger.info("Submission from review failed: %s", exc)
            self.failure = exc
            self.error = str(exc)
            self.field_errors = dict(exc.field_errors)
            return None
        finally:
            self.loading = False

        self.application_id = app.id
        self.step = WizardStep.SUCCESS
        return app
