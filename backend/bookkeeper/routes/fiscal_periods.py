"""Fiscal period routes -- list, create and close."""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import model_validator
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookkeeper.database import get_db
from bookkeeper.errors import BadRequestError, InternalError, NotFoundError
from bookkeeper.middleware.auth import get_optional_user
from bookkeeper.schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organizations/{org_id}/fiscal-periods", tags=["fiscal-periods"])


class FiscalPeriodCreate(CamelModel):
    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


def fiscal_period_out(p) -> dict:
    return {
        "id": str(p.id),
        "organizationId": str(p.organization_id),
        "name": p.name,
        "startDate": p.start_date.isoformat(),
        "endDate": p.end_date.isoformat(),
        "isClosed": p.is_closed,
        "closedAt": p.closed_at.isoformat() if p.closed_at else None,
        "closedBy": p.closed_by,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }


@router.get("")
async def list_fiscal_periods(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.org import FiscalPeriod

    stmt = (
        select(FiscalPeriod)
        .where(FiscalPeriod.organization_id == org_id)
        .order_by(FiscalPeriod.start_date.desc())
    )
    try:
        result = await db.execute(stmt)
        periods = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to list fiscal periods for {org_id}")
        raise InternalError("Failed to get fiscal periods", e)

    logger.debug(f"Found {len(periods)} periods for org {org_id}")
    return [fiscal_period_out(p) for p in periods]


@router.post("", status_code=201)
async def create_fiscal_period(
    org_id: uuid.UUID,
    body: FiscalPeriodCreate,
    db: AsyncSession = Depends(get_db),
):
    from bookkeeper.models.org import FiscalPeriod

    if not body.name or not body.start_date or not body.end_date:
        raise BadRequestError("name, startDate, and endDate are required")

    period = FiscalPeriod(
        organization_id=org_id,
        name=body.name,
        start_date=body.start_date,
        end_date=body.end_date,
        is_closed=False,
    )
    try:
        db.add(period)
        await db.commit()
        await db.refresh(period)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create fiscal period for {org_id}")
        raise InternalError("Failed to create fiscal period", e)

    logger.info(f"Created fiscal period {period.id} ({period.name})")
    return fiscal_period_out(period)


@router.post("/{period_id}/close")
async def close_fiscal_period(
    org_id: uuid.UUID,
    period_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: dict | None = Depends(get_optional_user),
):
    """Close a period; journal entries dated inside it are rejected afterwards."""
    from bookkeeper.models.org import FiscalPeriod

    try:
        result = await db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.id == period_id,
                FiscalPeriod.organization_id == org_id,
            )
        )
        period = result.scalar_one_or_none()
        if not period:
            raise NotFoundError("Fiscal period")
        if period.is_closed:
            raise HTTPException(status_code=422, detail=f"Fiscal period {period.name} is already closed")

        period.is_closed = True
        period.closed_at = datetime.now(timezone.utc)
        period.closed_by = user["username"] if user else "system"
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to close fiscal period {period_id}")
        raise InternalError("Failed to close fiscal period", e)

    logger.info(f"Closed fiscal period {period.name} ({period_id}) by {period.closed_by}")
    return fiscal_period_out(period)
