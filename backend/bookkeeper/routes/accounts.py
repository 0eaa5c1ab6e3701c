"""Single-account routes served from the demo fixture."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body

from bookkeeper import demo_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/{account_id}")
async def get_account(account_id: str):
    return {"id": account_id, **demo_data.DEMO_ACCOUNT, "updatedAt": _now()}


@router.put("/{account_id}")
async def update_account(account_id: str, body: dict[str, Any] = Body(default_factory=dict)):
    logger.info(f"Updated account {account_id}: {sorted(body)}")
    return {**demo_data.DEMO_ACCOUNT, **body, "id": account_id, "updatedAt": _now()}


@router.delete("/{account_id}")
async def delete_account(account_id: str):
    logger.info(f"Deleted account {account_id}")
    return {"success": True, "message": "Account deleted"}
