from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from schemas.application import ApplicationUpdate, StepFields
from services.applications import (
    application_to_response,
    application_to_status,
    get_application,
    list_applications,
    update_application_status,
)
from services.forms import WizardForm
from services.notifier import AdminNotifier, get_notifier
from services.projection import ALLOWED_DURATIONS, projected_return
from services.receipts import ReceiptFile
from services.submission import PersistenceError, SubmissionPipeline
from services.validation import validate_step
from services.wizard import ApplicationWizard, WizardStep

router = APIRouter(prefix="/api/applications", tags=["applications"])
status_router = APIRouter(prefix="/api", tags=["applications"])

MSG_APPLICATION_NOT_FOUND = "Application not found"


@router.get("")
async def list_all_applications(
    email: Optional[str] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    apps = await list_applications(db, email=email, status=status)
    return [application_to_response(a) for a in apps]


@router.post("", status_code=201)
async def submit_application(
    full_name: str = Form("", alias="fullName"),
    phone: str = Form(""),
    email: str = Form(""),
    investment_amount: int = Form(0, alias="investmentAmount"),
    custom_amount: str = Form("", alias="customAmount"),
    duration: int = Form(3),
    account_name: str = Form("", alias="accountName"),
    bank_name: str = Form("", alias="bankName"),
    account_number: str = Form("", alias="accountNumber"),
    transaction_reference: str = Form("", alias="transactionReference"),
    payment_screenshot: Optional[UploadFile] = File(None, alias="paymentScreenshot"),
    db: AsyncSession = Depends(get_db),
    notifier: AdminNotifier = Depends(get_notifier),
):
    """
    Submit a completed wizard. The client has already walked steps 1-3, so the
    wizard resumes at review; the pipeline re-validates the whole form.
    """
    form = WizardForm(
        full_name=full_name,
        phone=phone,
        email=email,
        investment_amount=investment_amount,
        custom_amount=custom_amount,
        duration=duration,
        account_name=account_name,
        bank_name=bank_name,
        account_number=account_number,
        transaction_reference=transaction_reference,
    )
    if payment_screenshot is not None and payment_screenshot.filename:
        form.payment_screenshot = ReceiptFile.from_upload(payment_screenshot)

    wizard = ApplicationWizard(form, step=WizardStep.REVIEW)
    pipeline = SubmissionPipeline(
        db,
        notifier,
        monthly_rate=settings.monthly_rate,
        read_timeout=settings.file_read_timeout,
    )
    app = await wizard.submit(pipeline)
    if app is None:
        status_code = 500 if isinstance(wizard.failure, PersistenceError) else 400
        return JSONResponse(
            status_code=status_code,
            content={"error": wizard.error, "fieldErrors": wizard.field_errors},
        )
    return {
        "success": True,
        "applicationId": app.id,
        "application": application_to_response(app),
    }


@router.post("/validate/{step}")
async def validate_wizard_step(step: int, body: StepFields):
    """Server-side gate for the details and bank steps."""
    if step not in (WizardStep.DETAILS, WizardStep.BANK):
        raise HTTPException(status_code=400, detail="Only steps 1 and 2 can be validated without a file upload")
    form = WizardForm(**body.model_dump(by_alias=False))
    result = validate_step(step, form)
    return {"valid": result.valid, "fieldErrors": result.field_errors}


@router.get("/quote")
async def quote(amount: int = Query(..., gt=0), duration: int = Query(3)):
    if duration not in ALLOWED_DURATIONS:
        raise HTTPException(status_code=400, detail="duration must be 3, 6 or 12")
    return {
        "amount": amount,
        "duration": duration,
        "monthlyRate": settings.monthly_rate,
        "projectedReturn": projected_return(amount, duration, settings.monthly_rate),
    }


@router.get("/{application_id}")
async def read_application(application_id: str, db: AsyncSession = Depends(get_db)):
    app = await get_application(db, application_id)
    if not app:
        raise HTTPException(status_code=404, detail=MSG_APPLICATION_NOT_FOUND)
    return application_to_response(app)


@router.patch("/{application_id}")
async def update_application(application_id: str, body: ApplicationUpdate, db: AsyncSession = Depends(get_db)):
    app = await update_application_status(db, application_id, body.status)
    if not app:
        raise HTTPException(status_code=404, detail=MSG_APPLICATION_NOT_FOUND)
    return application_to_response(app)


@status_router.get("/application-status")
async def application_status(email: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    apps = await list_applications(db, email=email)
    return {"applications": [application_to_status(a) for a in apps]}
