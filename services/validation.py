"""
Field validation for the application wizard and the notification endpoint.

Validators return messages instead of raising; callers decide whether a
failure blocks navigation or rejects a request.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from services.forms import WizardForm
from services.projection import ALLOWED_DURATIONS, parse_custom_amount
from services.receipts import receipt_problem

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"\+?[0-9]{10,15}")
ACCOUNT_NUMBER_RE = re.compile(r"[0-9]{10,12}")
_WHITESPACE = re.compile(r"\s+")

NOTIFICATION_REQUIRED_FIELDS = (
    "fullName",
    "email",
    "investmentAmount",
    "duration",
    "projectedReturn",
    "applicationId",
)


@dataclass
class StepValidation:
    valid: bool = True
    field_errors: dict[str, str] = field(default_factory=dict)

    def add(self, name: str, message: str) -> None:
        self.field_errors[name] = message
        self.valid = False


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email or ""))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.fullmatch(_WHITESPACE.sub("", phone or "")))


def is_valid_account_number(account_number: str) -> bool:
    return bool(ACCOUNT_NUMBER_RE.fullmatch(_WHITESPACE.sub("", account_number or "")))


def _validate_details(form: WizardForm, result: StepValidation) -> None:
    if not form.full_name.strip():
        result.add("fullName", "Full name is required")
    if not form.phone.strip():
        result.add("phone", "Phone number is required")
    elif not is_valid_phone(form.phone):
        result.add("phone", "Please enter a valid phone number")
    if not form.email.strip():
        result.add("email", "Email is required")
    elif not is_valid_email(form.email):
        result.add("email", "Please enter a valid email address")
    if not form.investment_amount and not form.custom_amount:
        result.add("investmentAmount", "Please select or enter an investment amount")


def _validate_bank(form: WizardForm, result: StepValidation) -> None:
    if not form.account_name.strip():
        result.add("accountName", "Account name is required")
    if not form.bank_name.strip():
        result.add("bankName", "Please select a bank")
    if not form.account_number.strip():
        result.add("accountNumber", "Account number is required")
    elif not is_valid_account_number(form.account_number):
        result.add("accountNumber", "Account number must be 10 to 12 digits")


def _validate_payment(form: WizardForm, result: StepValidation) -> None:
    if form.payment_screenshot is None:
        result.add("paymentScreenshot", "Please upload payment proof")
        return
    problem = receipt_problem(form.payment_screenshot)
    if problem:
        result.add("paymentScreenshot", problem)


_STEP_RULES = {
    1: _validate_details,
    2: _validate_bank,
    3: _validate_payment,
}


def validate_step(step: int, form: WizardForm) -> StepValidation:
    """Validate the fields owned by one wizard step. Review and success carry no rules."""
    result = StepValidation()
    rules = _STEP_RULES.get(int(step))
    if rules is not None:
        rules(form, result)
    return result


def validate_form(form: WizardForm) -> list[str]:
    """Whole-form pass run just before persisting, independent of step gating."""
    errors: list[str] = []

    if not form.full_name.strip():
        errors.append("Full name is required")
    if not form.email.strip():
        errors.append("Email is required")
    if not form.phone.strip():
        errors.append("Phone number is required")
    if not form.account_name.strip():
        errors.append("Account name is required")
    if not form.bank_name.strip():
        errors.append("Bank name is required")
    if not form.account_number.strip():
        errors.append("Account number is required")

    if form.email.strip() and not is_valid_email(form.email):
        errors.append("Invalid email format")
    if form.phone.strip() and not is_valid_phone(form.phone):
        errors.append("Invalid phone number format")
    if form.account_number.strip() and not is_valid_account_number(form.account_number):
        errors.append("Invalid account number format")

    amount = form.investment_amount or parse_custom_amount(form.custom_amount or "0")
    if amount is None or amount <= 0:
        errors.append("Please enter a valid investment amount")
    if form.duration not in ALLOWED_DURATIONS:
        errors.append("Please choose a duration of 3, 6 or 12 months")

    return errors


def missing_notification_fields(body: dict[str, Any]) -> list[str]:
    """Required notification keys that are absent, null or blank, in declaration order."""
    missing = []
    for name in NOTIFICATION_REQUIRED_FIELDS:
        value = body.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def notification_format_errors(email: str, investment_amount: int, duration: int, projected_return: int) -> list[str]:
    errors = []
    if not is_valid_email(email):
        errors.append("Invalid email format")
    if investment_amount <= 0:
        errors.append("investmentAmount must be a positive number")
    if projected_return <= 0:
        errors.append("projectedReturn must be a positive number")
    if duration not in ALLOWED_DURATIONS:
        errors.append("duration must be 3, 6 or 12")
    return errors
