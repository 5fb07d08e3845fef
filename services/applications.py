from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import InvestmentApplication


def new_application_id() -> str:
    return f"inv-{uuid.uuid4().hex[:12]}"


async def create_application(session: AsyncSession, fields: dict[str, Any]) -> InvestmentApplication:
    """Insert a pending application and commit so the record is durable before anything else happens."""
    now = datetime.now(timezone.utc)
    app = InvestmentApplication(
        id=new_application_id(),
        status="pending",
        created_at=now,
        updated_at=now,
        **fields,
    )
    session.add(app)
    await session.commit()
    return app


async def get_application(session: AsyncSession, application_id: str) -> Optional[InvestmentApplication]:
    result = await session.execute(select(InvestmentApplication).where(InvestmentApplication.id == application_id))
    return result.scalar_one_or_none()


async def update_application_status(
    session: AsyncSession, application_id: str, status: str
) -> Optional[InvestmentApplication]:
    app = await get_application(session, application_id)
    if app is None:
        return None
    app.status = status
    app.updated_at = datetime.now(timezone.utc)
    await session.flush()
    return app


async def list_applications(
    session: AsyncSession,
    email: Optional[str] = None,
    status: Optional[str] = None,
) -> list[InvestmentApplication]:
    """Filter by email, else by status, else everything; newest first."""
    query = select(InvestmentApplication)
    if email:
        query = query.where(InvestmentApplication.email == email)
    elif status:
        query = query.where(InvestmentApplication.status == status)
    query = query.order_by(InvestmentApplication.created_at.desc())
    result = await session.execute(query)
    return list(result.scalars().all())


def application_to_response(app: InvestmentApplication) -> dict[str, Any]:
    """Serialize with the camelCase keys the frontend reads."""
    return {
        "id": app.id,
        "fullName": app.full_name,
        "phone": app.phone,
        "email": app.email,
        "investmentAmount": app.investment_amount,
        "duration": app.duration,
        "projectedReturn": app.projected_return,
        "accountName": app.account_name,
        "bankName": app.bank_name,
        "accountNumber": app.account_number,
        "paymentScreenshotURL": app.payment_screenshot_url,
        "transactionReference": app.transaction_reference,
        "status": app.status,
        "createdAt": app.created_at.isoformat() if app.created_at else None,
        "updatedAt": app.updated_at.isoformat() if app.updated_at else None,
    }


def application_to_status(app: InvestmentApplication) -> dict[str, Any]:
    return {
        "id": app.id,
        "email": app.email,
        "fullName": app.full_name,
        "investmentAmount": app.investment_amount,
        "status": app.status,
        "createdAt": app.created_at.isoformat() if app.created_at else None,
    }
