"""Custom field definition routes.

Two routers: the organization-scoped collection (list, create, reorder) and
the single-definition resource under ``/api/custom-fields/{field_id}``.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookkeeper.database import get_db
from bookkeeper.errors import BadRequestError, InternalError, NotFoundError
from bookkeeper.schemas import CamelModel

logger = logging.getLogger(__name__)

org_router = APIRouter(prefix="/api/organizations/{org_id}/custom-fields", tags=["custom-fields"])
router = APIRouter(prefix="/api/custom-fields", tags=["custom-fields"])

# Columns a client may explicitly clear with null
NULLABLE_COLUMNS = {"default_value", "validation_rules", "options"}


class CustomFieldCreate(CamelModel):
    field_name: str
    field_type: str
    entity_type: str = "JOURNAL_ENTRY"
    is_required: bool = False
    default_value: str | None = None
    display_order: int = 0
    validation_rules: dict[str, Any] | None = None
    options: list[Any] | None = None


class CustomFieldUpdate(CamelModel):
    field_name: str | None = None
    field_type: str | None = None
    entity_type: str | None = None
    is_required: bool | None = None
    default_value: str | None = None
    display_order: int | None = None
    validation_rules: dict[str, Any] | None = None
    options: list[Any] | None = None
    is_active: bool | None = None


class ReorderRequest(CamelModel):
    field_ids: list[uuid.UUID] | None = None


def custom_field_update_values(body: CustomFieldUpdate) -> dict[str, Any]:
    """Column values for a partial update.

    Only fields present in the request body are written; a null is honoured
    for nullable columns and ignored for the rest.  ``updated_at`` is always
    refreshed.
    """
    values = {
        column: value
        for column, value in body.model_dump(exclude_unset=True).items()
        if value is not None or column in NULLABLE_COLUMNS
    }
    values["updated_at"] = func.now()
    return values


def custom_field_out(f) -> dict:
    return {
        "id": str(f.id),
        "organizationId": str(f.organization_id),
        "fieldName": f.field_name,
        "fieldType": f.field_type,
        "entityType": f.entity_type,
        "isRequired": f.is_required,
        "defaultValue": f.default_value,
        "displayOrder": f.display_order,
        "validationRules": f.validation_rules,
        "options": f.options,
        "isActive": f.is_active,
        "createdAt": f.created_at.isoformat() if f.created_at else None,
        "updatedAt": f.updated_at.isoformat() if f.updated_at else None,
    }


# ---------------------------------------------------------------------------
# ORGANIZATION COLLECTION
# ---------------------------------------------------------------------------

@org_router.get("")
async def list_custom_fields(org_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.custom_field import CustomFieldDefinition

    stmt = (
        select(CustomFieldDefinition)
        .where(
            CustomFieldDefinition.organization_id == org_id,
            CustomFieldDefinition.is_active == True,
        )
        .order_by(CustomFieldDefinition.display_order, CustomFieldDefinition.field_name)
    )
    try:
        result = await db.execute(stmt)
        fields = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to list custom fields for {org_id}")
        raise InternalError("Failed to get custom fields", e)

    return [custom_field_out(f) for f in fields]


@org_router.post("", status_code=201)
async def create_custom_field(
    org_id: uuid.UUID,
    body: CustomFieldCreate,
    db: AsyncSession = Depends(get_db),
):
    from bookkeeper.models.custom_field import CustomFieldDefinition

    field = CustomFieldDefinition(organization_id=org_id, is_active=True, **body.model_dump())
    try:
        db.add(field)
        await db.commit()
        await db.refresh(field)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create custom field for {org_id}")
        raise InternalError("Failed to create custom field", e)

    logger.info(f"Created custom field {field.field_name!r} ({field.id})")
    return custom_field_out(field)


@org_router.post("/reorder")
async def reorder_custom_fields(
    org_id: uuid.UUID,
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    """Set each field's display order to its position in ``fieldIds``."""
    from bookkeeper.models.custom_field import CustomFieldDefinition

    if body.field_ids is None:
        raise BadRequestError("fieldIds array is required")

    try:
        for position, field_id in enumerate(body.field_ids):
            await db.execute(
                update(CustomFieldDefinition)
                .where(
                    CustomFieldDefinition.id == field_id,
                    CustomFieldDefinition.organization_id == org_id,
                )
                .values(display_order=position, updated_at=func.now())
            )
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to reorder custom fields for {org_id}")
        raise InternalError("Failed to reorder custom fields", e)

    logger.info(f"Updated order for {len(body.field_ids)} fields")
    return {"success": True, "message": "Field order updated"}


# ---------------------------------------------------------------------------
# SINGLE DEFINITION
# ---------------------------------------------------------------------------

@router.get("/{field_id}")
async def get_custom_field(field_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.custom_field import CustomFieldDefinition

    try:
        result = await db.execute(
            select(CustomFieldDefinition).where(CustomFieldDefinition.id == field_id)
        )
        field = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load custom field {field_id}")
        raise InternalError("Failed to get custom field", e)
    if not field:
        raise NotFoundError("Custom field")

    return custom_field_out(field)


@router.put("/{field_id}")
async def update_custom_field(
    field_id: uuid.UUID,
    body: CustomFieldUpdate,
    db: AsyncSession = Depends(get_db),
):
    from bookkeeper.models.custom_field import CustomFieldDefinition

    stmt = (
        update(CustomFieldDefinition)
        .where(CustomFieldDefinition.id == field_id)
        .values(**custom_field_update_values(body))
        .returning(CustomFieldDefinition)
    )
    try:
        result = await db.execute(stmt)
        field = result.scalar_one_or_none()
        if not field:
            raise NotFoundError("Custom field")
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to update custom field {field_id}")
        raise InternalError("Failed to update custom field", e)

    logger.info(f"Updated custom field {field_id}")
    return custom_field_out(field)


@router.delete("/{field_id}")
async def delete_custom_field(field_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    from bookkeeper.models.custom_field import CustomFieldDefinition

    stmt = (
        update(CustomFieldDefinition)
        .where(CustomFieldDefinition.id == field_id)
        .values(is_active=False, updated_at=func.now())
        .returning(CustomFieldDefinition.id)
    )
    try:
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Custom field")
        await db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to delete custom field {field_id}")
        raise InternalError("Failed to delete custom field", e)

    logger.info(f"Deleted custom field {field_id}")
    return {"success": True, "message": "Custom field deleted"}
