"""Financial report routes (demo figures)."""
from __future__ import annotations

from fastapi import APIRouter

from bookkeeper import demo_data

router = APIRouter(prefix="/api/organizations/{org_id}/reports", tags=["reports"])


@router.get("/trial-balance")
async def trial_balance(org_id: str):
    return demo_data.TRIAL_BALANCE


@router.get("/balance-sheet")
async def balance_sheet(org_id: str):
    return demo_data.BALANCE_SHEET


@router.get("/profit-loss")
async def profit_loss(org_id: str):
    return demo_data.PROFIT_LOSS
