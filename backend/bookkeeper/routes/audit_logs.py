"""Audit log routes -- filtered listing, append, and statistics from the backend."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookkeeper.config import settings
from bookkeeper.database import get_db
from bookkeeper.errors import InternalError
from bookkeeper.schemas import CamelModel
from bookkeeper.services.proxy import UpstreamProxy, get_upstream_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audit-logs", tags=["audit-logs"])

SORT_COLUMNS = {"timestamp", "username", "action"}


class AuditLogCreate(CamelModel):
    organization_id: uuid.UUID | None = None
    user_id: str | None = None
    username: str | None = None
    action: str
    entity_type: str | None = None
    entity_id: str | None = None
    description: str | None = None
    changes: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None


def audit_log_out(log) -> dict:
    return {
        "id": str(log.id),
        "organizationId": str(log.organization_id) if log.organization_id else None,
        "userId": log.user_id,
        "username": log.username,
        "action": log.action,
        "entityType": log.entity_type,
        "entityId": log.entity_id,
        "description": log.description,
        "changes": log.changes,
        "metadata": log.metadata_,
        "ipAddress": log.ip_address,
        "userAgent": log.user_agent,
        "timestamp": log.timestamp.isoformat() if log.timestamp else None,
        "createdAt": log.created_at.isoformat() if log.created_at else None,
    }


@router.get("/stats")
async def audit_log_stats(
    request: Request,
    client: httpx.AsyncClient = Depends(get_upstream_client),
):
    """Relayed verbatim from ``BACKEND_URL``."""
    return await UpstreamProxy(client).forward(request, "/api/audit-logs/stats")


@router.get("")
async def list_audit_logs(
    user_id: str | None = Query(None, alias="userId"),
    username: str | None = Query(None),
    action: str | None = Query(None),
    entity_type: str | None = Query(None, alias="entityType"),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    sort_by: str = Query("timestamp", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int = Query(100, ge=0),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    from bookkeeper.models.audit import AuditLog

    filters = []
    if user_id:
        filters.append(AuditLog.user_id == user_id)
    if username:
        filters.append(AuditLog.username.ilike(f"%{username}%"))
    if action:
        filters.append(AuditLog.action == action)
    if entity_type:
        filters.append(AuditLog.entity_type == entity_type)
    if start_date:
        filters.append(AuditLog.timestamp >= start_date)
    if end_date:
        filters.append(AuditLog.timestamp <= end_date)

    sort_column = getattr(AuditLog, sort_by if sort_by in SORT_COLUMNS else "timestamp")
    ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()

    data_stmt = select(AuditLog).where(*filters).order_by(ordering).limit(limit).offset(offset)
    count_stmt = select(func.count(AuditLog.id)).where(*filters)

    try:
        logs = (await db.execute(data_stmt)).scalars().all()
        total = (await db.execute(count_stmt)).scalar_one()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch audit logs")
        raise InternalError("Failed to fetch audit logs", e)

    logger.debug(f"Fetched {len(logs)} of {total} audit logs")
    return {
        "logs": [audit_log_out(log) for log in logs],
        "totalCount": total,
        "limit": limit,
        "offset": offset,
        "hasMore": offset + len(logs) < total,
    }


@router.post("", status_code=201)
async def create_audit_log(body: AuditLogCreate, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.audit import AuditLog

    data = body.model_dump(exclude={"metadata", "organization_id"})
    log = AuditLog(
        organization_id=body.organization_id or uuid.UUID(settings.DEMO_ORG_ID),
        metadata_=body.metadata,
        timestamp=datetime.now(timezone.utc),
        **data,
    )
    try:
        db.add(log)
        await db.commit()
        await db.refresh(log)
    except SQLAlchemyError as e:
        logger.exception("Failed to create audit log")
        raise InternalError("Failed to create audit log", e)

    logger.info(f"Created audit log {log.id} ({log.action})")
    return audit_log_out(log)
