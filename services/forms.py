from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from services.projection import DEFAULT_MONTHLY_RATE, projected_return, resolve_amount
from services.receipts import ReceiptFile

# Fields that are escaped before storage and before interpolation into mail bodies
TEXT_FIELDS = (
    "full_name",
    "phone",
    "email",
    "account_name",
    "bank_name",
    "account_number",
    "transaction_reference",
)


@dataclass
class WizardForm:
    """Application fields as typed by the applicant, before sanitization."""

    full_name: str = ""
    phone: str = ""
    email: str = ""
    investment_amount: int = 0
    custom_amount: str = ""
    duration: int = 3
    account_name: str = ""
    bank_name: str = ""
    account_number: str = ""
    transaction_reference: str = ""
    payment_screenshot: Optional[ReceiptFile] = field(default=None, repr=False)

    @property
    def final_amount(self) -> int:
        return resolve_amount(self.investment_amount, self.custom_amount)

    def projected_return(self, monthly_rate: float = DEFAULT_MONTHLY_RATE) -> int:
        return projected_return(self.final_amount, self.duration, monthly_rate)

    def text_values(self) -> dict[str, str]:
        return {name: getattr(self, name) or "" for name in TEXT_FIELDS}
