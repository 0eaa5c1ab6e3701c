"""DATEV routes -- CSV export for tax advisors and the pre-export check."""
from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Query
from fastapi.responses import Response

from bookkeeper.services import datev_export

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organizations/{org_id}", tags=["datev"])


@router.get("/datev-export")
async def export_datev(
    org_id: str,
    framework: str | None = Query(None),
    consultant_number: str | None = Query(None, alias="consultantNumber"),
    client_number: str | None = Query(None, alias="clientNumber"),
    date_from: str | None = Query(None, alias="dateFrom"),
    date_to: str | None = Query(None, alias="dateTo"),
):
    """Download the bookings as a DATEV ``EXTF`` Buchungsstapel file."""
    today = date.today()
    content = datev_export.build_export(
        consultant_number, client_number, date_from, date_to, today=today
    )
    logger.info(f"DATEV export for {org_id} ({framework or 'default framework'}, {date_from}..{date_to})")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{datev_export.export_filename(today)}"',
        },
    )


@router.get("/datev-validate")
async def validate_datev(org_id: str):
    report = datev_export.validation_report()
    logger.info(f"DATEV validation for {org_id}: valid={report['valid']}")
    return report
