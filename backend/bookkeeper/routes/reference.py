"""Reference data routes -- account frameworks, account types, currencies, exchange rates."""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookkeeper import demo_data
from bookkeeper.database import get_db
from bookkeeper.errors import InternalError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reference"])


# ---------------------------------------------------------------------------
# ACCOUNT FRAMEWORKS
# ---------------------------------------------------------------------------

@router.get("/account-frameworks")
async def list_account_frameworks():
    return demo_data.ACCOUNT_FRAMEWORKS


@router.get("/account-frameworks/{framework_id}")
async def get_framework_accounts(framework_id: str):
    """Template accounts for a framework; unknown frameworks have none."""
    return demo_data.FRAMEWORK_ACCOUNTS.get(framework_id, [])


# ---------------------------------------------------------------------------
# ACCOUNT TYPES
# ---------------------------------------------------------------------------

@router.get("/account-types")
async def list_account_types(db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.gl import AccountType

    try:
        result = await db.execute(select(AccountType).order_by(AccountType.display_order))
        types = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception("Failed to load account types")
        raise InternalError("Failed to get account types", e)

    return [
        {
            "id": t.id,
            "code": t.code,
            "name": t.name,
            "category": t.category,
            "normalBalance": t.normal_balance,
            "isBalanceSheet": t.is_balance_sheet,
            "displayOrder": t.display_order,
        }
        for t in types
    ]


# ---------------------------------------------------------------------------
# CURRENCIES & EXCHANGE RATES
# ---------------------------------------------------------------------------

@router.get("/currencies")
async def list_currencies():
    return demo_data.CURRENCIES


@router.get("/exchange-rates")
async def get_exchange_rates(
    from_currency: str | None = Query(None, alias="from"),
    to_currency: str | None = Query(None, alias="to"),
    rate_date: date | None = Query(None, alias="date"),
):
    rate = demo_data.EXCHANGE_RATES.get(f"{from_currency}_{to_currency}", 1.0)
    now = datetime.now(timezone.utc)
    return [
        {
            "id": "1",
            "fromCurrency": from_currency,
            "toCurrency": to_currency,
            "rate": rate,
            "date": (rate_date or now.date()).isoformat(),
            "source": "DEMO",
            "createdAt": now.isoformat(),
        }
    ]


@router.post("/exchange-rates")
async def update_exchange_rates():
    return {"success": True, "message": "Exchange rates updated"}
