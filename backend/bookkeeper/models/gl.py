"""General ledger models: account types, accounts, journal entries and lines."""
from __future__ import annotations

import datetime
import decimal
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookkeeper.database import Base
from bookkeeper.models.base import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from bookkeeper.models.org import Organization


class AccountType(Base):
    """Reference row classifying accounts (CASH, AR, AP, ...)."""
    __tablename__ = "account_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    normal_balance: Mapped[str] = mapped_column(String(10), nullable=False)
    is_balance_sheet: Mapped[bool] = mapped_column(Boolean, nullable=False)
    display_order: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )

    def __repr__(self) -> str:
        return f"<AccountType {self.code!r} {self.category!r}>"


class Account(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Chart of accounts entry, numbered uniquely within an organization."""
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("organization_id", "account_number"),
    )

    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id"),
        nullable=False,
    )
    account_number: Mapped[str] = mapped_column(String(20), nullable=False)
    account_name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account_types.id"),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, server_default=text("'USD'")
    )
    description: Mapped[str | None] = mapped_column(Text)
    is_system_account: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    # ------ relationships ------
    organization: Mapped[Organization] = relationship(
        "Organization",
        back_populates="accounts",
    )
    account_type: Mapped[AccountType] = relationship(
        "AccountType",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Account {self.account_number!r} {self.account_name!r}>"


class JournalEntry(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A journal entry header owning its debit and credit lines."""
    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("organization_id", "entry_number"),
    )

    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id"),
        nullable=False,
    )
    entry_number: Mapped[str] = mapped_column(String(50), nullable=False)
    entry_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    reference_number: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        server_default=text("'draft'"),
    )
    posted_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True))

    # ------ relationships ------
    organization: Mapped[Organization] = relationship(
        "Organization",
        back_populates="journal_entries",
    )
    lines: Mapped[list[JournalEntryLine]] = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.line_number",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.entry_number!r} status={self.status!r}>"


class JournalEntryLine(UUIDPrimaryKeyMixin, Base):
    """Individual debit or credit line within a journal entry."""
    __tablename__ = "journal_entry_lines"

    journal_entry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id"),
        nullable=False,
    )
    debit_amount: Mapped[decimal.Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, server_default=text("0")
    )
    credit_amount: Mapped[decimal.Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, server_default=text("0")
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, server_default=text("'USD'")
    )
    description: Mapped[str | None] = mapped_column(Text)

    # ------ relationships ------
    journal_entry: Mapped[JournalEntry] = relationship(
        "JournalEntry",
        back_populates="lines",
    )
    account: Mapped[Account] = relationship(
        "Account",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntryLine #{self.line_number} "
            f"debit={self.debit_amount} credit={self.credit_amount}>"
        )
