"""Journal entry routes -- list with lines, and balanced entry creation."""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookkeeper.database import get_db
from bookkeeper.errors import BadRequestError, InternalError
from bookkeeper.schemas import CamelModel
from bookkeeper.services.entry_generator import format_entry_number

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organizations/{org_id}/journal-entries", tags=["journal-entries"])

MAX_ENTRIES = 1000
ZERO = Decimal("0")

# Same precision as the NUMERIC(15, 2) amount columns
Amount = Annotated[Decimal, Field(max_digits=15, decimal_places=2)]


class JournalLineIn(CamelModel):
    account_id: uuid.UUID
    debit_amount: Amount = ZERO
    credit_amount: Amount = ZERO
    currency: str = "USD"
    description: str | None = None


class JournalEntryCreate(CamelModel):
    entry_number: str | None = None
    entry_date: date
    description: str | None = None
    reference_number: str | None = None
    status: Literal["draft", "posted"] = "draft"
    lines: list[JournalLineIn]


def check_balanced(lines: list[JournalLineIn]) -> tuple[Decimal, Decimal]:
    """Validate double-entry rules and return ``(total_debit, total_credit)``.

    Raises ``HTTPException(422)`` when the entry has fewer than two lines, a
    line carries a negative amount, a line has both or neither side set, or
    the totals differ.
    """
    if len(lines) < 2:
        raise HTTPException(status_code=422, detail="Journal entry must have at least 2 lines")

    for i, line in enumerate(lines, start=1):
        if line.debit_amount < 0 or line.credit_amount < 0:
            raise HTTPException(status_code=422, detail=f"Line {i}: amounts cannot be negative")
        if (line.debit_amount > 0) == (line.credit_amount > 0):
            raise HTTPException(
                status_code=422,
                detail=f"Line {i}: exactly one of debit or credit must be nonzero",
            )

    total_debit = sum((l.debit_amount for l in lines), ZERO)
    total_credit = sum((l.credit_amount for l in lines), ZERO)
    if total_debit != total_credit:
        raise HTTPException(
            status_code=422,
            detail=f"Debits ({total_debit}) must equal credits ({total_credit})",
        )
    return total_debit, total_credit


def journal_line_out(l, account=None) -> dict:
    return {
        "id": str(l.id) if l.id else None,
        "lineNumber": l.line_number,
        "accountId": str(l.account_id),
        "account": {
            "accountNumber": account.account_number,
            "accountName": account.account_name,
        } if account else None,
        "debitAmount": float(l.debit_amount or 0),
        "creditAmount": float(l.credit_amount or 0),
        "currency": l.currency,
        "description": l.description,
    }


def journal_entry_out(je, lines: list[dict]) -> dict:
    return {
        "id": str(je.id),
        "organizationId": str(je.organization_id),
        "entryNumber": je.entry_number,
        "entryDate": je.entry_date.isoformat(),
        "description": je.description,
        "referenceNumber": je.reference_number,
        "status": je.status,
        "postedAt": je.posted_at.isoformat() if je.posted_at else None,
        "createdAt": je.created_at.isoformat() if je.created_at else None,
        "totalDebit": round(sum(l["debitAmount"] for l in lines), 2),
        "totalCredit": round(sum(l["creditAmount"] for l in lines), 2),
        "lines": lines,
    }


@router.get("")
async def list_journal_entries(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.gl import JournalEntry

    stmt = (
        select(JournalEntry)
        .options(selectinload(JournalEntry.lines))
        .where(JournalEntry.organization_id == org_id)
        .order_by(JournalEntry.entry_date.desc(), JournalEntry.entry_number.desc())
        .limit(MAX_ENTRIES)
    )
    try:
        result = await db.execute(stmt)
        entries = result.scalars().unique().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to list journal entries for {org_id}")
        raise InternalError("Failed to get journal entries", e)

    return [
        journal_entry_out(je, [journal_line_out(l, l.account) for l in je.lines])
        for je in entries
    ]


@router.post("", status_code=201)
async def create_journal_entry(
    org_id: uuid.UUID,
    body: JournalEntryCreate,
    db: AsyncSession = Depends(get_db),
):
    from bookkeeper.models.gl import Account, JournalEntry, JournalEntryLine
    from bookkeeper.models.org import FiscalPeriod

    check_balanced(body.lines)

    try:
        closed = (await db.execute(
            select(FiscalPeriod).where(
                FiscalPeriod.organization_id == org_id,
                FiscalPeriod.is_closed == True,
                FiscalPeriod.start_date <= body.entry_date,
                FiscalPeriod.end_date >= body.entry_date,
            )
        )).scalars().first()
        if closed:
            raise HTTPException(
                status_code=422,
                detail=f"Fiscal period {closed.name} is closed for date {body.entry_date}",
            )

        account_ids = {l.account_id for l in body.lines}
        accounts = {
            a.id: a
            for a in (await db.execute(
                select(Account).where(
                    Account.id.in_(account_ids),
                    Account.organization_id == org_id,
                )
            )).scalars().all()
        }
        missing = account_ids - accounts.keys()
        if missing:
            raise HTTPException(
                status_code=422,
                detail=f"Unknown account(s): {', '.join(sorted(str(m) for m in missing))}",
            )

        entry_number = body.entry_number
        if not entry_number:
            count = (await db.execute(
                select(func.count(JournalEntry.id)).where(JournalEntry.organization_id == org_id)
            )).scalar_one()
            entry_number = format_entry_number(count + 1)

        new_lines = [
            JournalEntryLine(
                line_number=i,
                account_id=line.account_id,
                debit_amount=line.debit_amount,
                credit_amount=line.credit_amount,
                currency=line.currency,
                description=line.description,
            )
            for i, line in enumerate(body.lines, start=1)
        ]
        je = JournalEntry(
            organization_id=org_id,
            entry_number=entry_number,
            entry_date=body.entry_date,
            description=body.description,
            reference_number=body.reference_number,
            status=body.status,
            posted_at=datetime.now(timezone.utc) if body.status == "posted" else None,
            lines=new_lines,
        )
        db.add(je)
        await db.commit()
        await db.refresh(je)
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Duplicate journal entry number for {org_id}: {e}")
        raise BadRequestError("A journal entry with this number already exists", message=str(e.orig))
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create journal entry for {org_id}")
        raise InternalError("Failed to create journal entry", e)

    logger.info(f"Created journal entry {je.entry_number} ({je.id}) for {org_id}")
    return journal_entry_out(
        je, [journal_line_out(l, accounts[l.account_id]) for l in new_lines]
    )
