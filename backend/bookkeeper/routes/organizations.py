"""Organization routes -- CRUD, chart-of-accounts fixture and dashboard metrics."""
from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookkeeper import demo_data
from bookkeeper.database import get_db
from bookkeeper.errors import BadRequestError, InternalError, NotFoundError
from bookkeeper.schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organizations", tags=["organizations"])

# Categories whose balance is debit-normal; everything else is credit-normal.
DEBIT_NORMAL = {"ASSET", "EXPENSE"}


class OrganizationCreate(CamelModel):
    name: str | None = None
    country_code: str | None = None
    default_currency: str | None = None
    default_timezone: str | None = None
    fiscal_year_start: int | None = None
    fiscal_year_end: int | None = None


class OrganizationUpdate(CamelModel):
    name: str | None = None
    country_code: str | None = None
    default_currency: str | None = None
    default_timezone: str | None = None
    fiscal_year_start: int | None = None
    fiscal_year_end: int | None = None


def organization_out(o) -> dict:
    return {
        "id": str(o.id),
        "name": o.name,
        "countryCode": o.country_code,
        "defaultCurrency": o.default_currency,
        "defaultTimezone": o.default_timezone,
        "fiscalYearStart": o.fiscal_year_start,
        "fiscalYearEnd": o.fiscal_year_end,
        "isActive": o.is_active,
        "createdAt": o.created_at.isoformat() if o.created_at else None,
        "updatedAt": o.updated_at.isoformat() if o.updated_at else None,
    }


# ---------------------------------------------------------------------------
# ORGANIZATIONS
# ---------------------------------------------------------------------------

@router.get("")
async def list_organizations(db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.org import Organization

    stmt = select(Organization).where(Organization.is_active == True).order_by(Organization.name)
    try:
        result = await db.execute(stmt)
        orgs = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception("Failed to list organizations")
        raise InternalError("Failed to get organizations", e)

    return [organization_out(o) for o in orgs]


@router.post("", status_code=201)
async def create_organization(body: OrganizationCreate, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.org import Organization

    if not body.name or not body.country_code or not body.default_currency:
        raise BadRequestError("name, countryCode, and defaultCurrency are required")

    org = Organization(
        name=body.name,
        country_code=body.country_code,
        default_currency=body.default_currency,
        default_timezone=body.default_timezone or "UTC",
        fiscal_year_start=body.fiscal_year_start or 1,
        fiscal_year_end=body.fiscal_year_end or 12,
        is_active=True,
    )
    try:
        db.add(org)
        await db.commit()
        await db.refresh(org)
    except SQLAlchemyError as e:
        logger.exception("Failed to create organization")
        raise InternalError("Failed to create organization", e)

    logger.info(f"Created organization {org.id}")
    return organization_out(org)


@router.get("/{org_id}")
async def get_organization(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.org import Organization

    try:
        result = await db.execute(select(Organization).where(Organization.id == org_id))
        org = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load organization {org_id}")
        raise InternalError("Failed to get organization", e)
    if not org:
        raise NotFoundError("Organization")

    return organization_out(org)


@router.put("/{org_id}")
async def update_organization(
    org_id: uuid.UUID,
    body: OrganizationUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update: fields omitted or null keep their stored value."""
    from bookkeeper.models.org import Organization

    stmt = (
        update(Organization)
        .where(Organization.id == org_id)
        .values(**body.model_dump(exclude_none=True), updated_at=func.now())
        .returning(Organization)
    )
    try:
        result = await db.execute(stmt)
        org = result.scalar_one_or_none()
        if not org:
            raise NotFoundError("Organization")
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to update organization {org_id}")
        raise InternalError("Failed to update organization", e)

    logger.info(f"Updated organization {org_id}")
    return organization_out(org)


@router.delete("/{org_id}")
async def delete_organization(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.org import Organization

    stmt = (
        update(Organization)
        .where(Organization.id == org_id)
        .values(is_active=False, updated_at=func.now())
        .returning(Organization.id)
    )
    try:
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Organization")
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to delete organization {org_id}")
        raise InternalError("Failed to delete organization", e)

    logger.info(f"Deleted organization {org_id}")
    return {"success": True, "message": "Organization deleted"}


# ---------------------------------------------------------------------------
# ACCOUNTS & DASHBOARD
# ---------------------------------------------------------------------------

@router.get("/{org_id}/accounts")
async def list_organization_accounts(org_id: str):
    return demo_data.ORGANIZATION_ACCOUNTS


@router.get("/{org_id}/dashboard")
async def get_dashboard(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Balances of posted entries rolled up by account category, plus counts."""
    from bookkeeper.models.gl import Account, AccountType, JournalEntry, JournalEntryLine

    balance_stmt = (
        select(
            AccountType.category.label("category"),
            func.coalesce(func.sum(JournalEntryLine.debit_amount), 0).label("debits"),
            func.coalesce(func.sum(JournalEntryLine.credit_amount), 0).label("credits"),
        )
        .join(JournalEntry, JournalEntry.id == JournalEntryLine.journal_entry_id)
        .join(Account, Account.id == JournalEntryLine.account_id)
        .join(AccountType, AccountType.id == Account.account_type_id)
        .where(JournalEntry.organization_id == org_id, JournalEntry.status == "posted")
        .group_by(AccountType.category)
    )

    try:
        rows = (await db.execute(balance_stmt)).all()
        accounts_count = (await db.execute(
            select(func.count(Account.id)).where(
                Account.organization_id == org_id, Account.is_active == True
            )
        )).scalar_one()
        entries_count = (await db.execute(
            select(func.count(JournalEntry.id)).where(JournalEntry.organization_id == org_id)
        )).scalar_one()
        pending_count = (await db.execute(
            select(func.count(JournalEntry.id)).where(
                JournalEntry.organization_id == org_id, JournalEntry.status == "draft"
            )
        )).scalar_one()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to compute dashboard for {org_id}")
        raise InternalError("Failed to get dashboard metrics", e)

    totals = {"ASSET": 0.0, "LIABILITY": 0.0, "EQUITY": 0.0, "REVENUE": 0.0, "EXPENSE": 0.0}
    for row in rows:
        category = (row.category or "").upper()
        debits, credits = float(row.debits or 0), float(row.credits or 0)
        totals[category] = debits - credits if category in DEBIT_NORMAL else credits - debits

    return {
        "totalAssets": round(totals["ASSET"], 2),
        "totalLiabilities": round(totals["LIABILITY"], 2),
        "totalEquity": round(totals["EQUITY"], 2),
        "revenue": round(totals["REVENUE"], 2),
        "expenses": round(totals["EXPENSE"], 2),
        "netIncome": round(totals["REVENUE"] - totals["EXPENSE"], 2),
        "accountsCount": accounts_count,
        "journalEntriesCount": entries_count,
        "pendingEntries": pending_count,
    }
