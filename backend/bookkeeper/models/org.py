"""Organizational models: organizations and their fiscal periods."""
from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookkeeper.database import Base
from bookkeeper.models.base import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from bookkeeper.models.gl import Account, JournalEntry


class Organization(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A company whose books are kept in the system."""
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    country_code: Mapped[str] = mapped_column(String(2), nullable=False)
    default_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    default_timezone: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'UTC'")
    )
    fiscal_year_start: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("1")
    )
    fiscal_year_end: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("12")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    # ------ relationships ------
    accounts: Mapped[list[Account]] = relationship(
        "Account",
        back_populates="organization",
    )
    journal_entries: Mapped[list[JournalEntry]] = relationship(
        "JournalEntry",
        back_populates="organization",
    )
    fiscal_periods: Mapped[list[FiscalPeriod]] = relationship(
        "FiscalPeriod",
        back_populates="organization",
    )

    def __repr__(self) -> str:
        return f"<Organization {self.name!r}>"


class FiscalPeriod(UUIDPrimaryKeyMixin, Base):
    """A bounded date range that can be closed to stop further posting."""
    __tablename__ = "fiscal_periods"

    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    is_closed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    closed_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True))
    closed_by: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False,
        server_default=text("NOW()"),
    )

    # ------ relationships ------
    organization: Mapped[Organization] = relationship(
        "Organization",
        back_populates="fiscal_periods",
    )

    def __repr__(self) -> str:
        return f"<FiscalPeriod {self.name!r} closed={self.is_closed}>"
