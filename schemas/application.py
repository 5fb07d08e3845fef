from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

ApplicationStatus = Literal["pending", "approved", "rejected"]


class ApplicationUpdate(BaseModel):
    """Reviewer-side update. Only the status of a stored application may change."""

    status: ApplicationStatus

    model_config = {"extra": "forbid"}


class StepFields(BaseModel):
    """Raw wizard fields posted for server-side step validation."""

    full_name: str = Field("", alias="fullName")
    phone: str = ""
    email: str = ""
    investment_amount: int = Field(0, alias="investmentAmount")
    custom_amount: str = Field("", alias="customAmount")
    duration: int = 3
    account_name: str = Field("", alias="accountName")
    bank_name: str = Field("", alias="bankName")
    account_number: str = Field("", alias="accountNumber")
    transaction_reference: str = Field("", alias="transactionReference")

    model_config = {"populate_by_name": True}


class AdminNotificationPayload(BaseModel):
    full_name: str = Field(..., alias="fullName")
    email: str
    phone: Optional[str] = ""
    investment_amount: int = Field(..., alias="investmentAmount")
    duration: int
    projected_return: int = Field(..., alias="projectedReturn")
    bank_name: Optional[str] = Field("", alias="bankName")
    account_number: Optional[str] = Field("", alias="accountNumber")
    payment_screenshot_url: Optional[str] = Field("", alias="paymentScreenshotURL")
    transaction_reference: Optional[str] = Field("", alias="transactionReference")
    application_id: str = Field(..., alias="applicationId")

    model_config = {"populate_by_name": True}


class ConfirmationPayload(BaseModel):
    full_name: str = Field(..., alias="fullName")
    email: str
    investment_amount: Optional[int] = Field(None, alias="investmentAmount")
    projected_return: Optional[int] = Field(None, alias="projectedReturn")
    application_id: Optional[str] = Field(None, alias="applicationId")

    model_config = {"populate_by_name": True}
