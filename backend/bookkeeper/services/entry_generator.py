"""Synthetic journal entry generation for demo and load data.

Each generated entry is a single two-line double-entry posting built from
one of ten transaction templates.  Generation is pure (no database access)
so the batching script and the tests share it.
"""

from __future__ import annotations

import dataclasses
import random
import uuid
from collections.abc import Iterator, Mapping
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
LOOKBACK_DAYS = 365


@dataclasses.dataclass(frozen=True)
class TransactionTemplate:
    description: str
    debit_account: str
    credit_account: str
    min_amount: int
    max_amount: int


TRANSACTION_TEMPLATES: tuple[TransactionTemplate, ...] = (
    # Sales
    TransactionTemplate("Sales Revenue", "1200", "4000", 1000, 10000),
    TransactionTemplate("Cash Sales", "1000", "4000", 500, 5000),
    TransactionTemplate("Customer Payment", "1000", "1200", 1000, 8000),
    # Purchases
    TransactionTemplate("Inventory Purchase", "1500", "2000", 2000, 15000),
    TransactionTemplate("Equipment Purchase", "1800", "1000", 5000, 50000),
    TransactionTemplate("Supplier Payment", "2000", "1000", 1000, 10000),
    # Expenses
    TransactionTemplate("Rent Payment", "6000", "1000", 3000, 8000),
    TransactionTemplate("Utilities Payment", "6100", "1000", 500, 2000),
    TransactionTemplate("Salaries Payment", "6200", "1000", 10000, 50000),
    TransactionTemplate("COGS", "5000", "1500", 3000, 20000),
)


@dataclasses.dataclass(frozen=True)
class GeneratedLine:
    line_number: int
    account_id: uuid.UUID
    debit_amount: Decimal
    credit_amount: Decimal
    currency: str = "USD"


@dataclasses.dataclass(frozen=True)
class GeneratedEntry:
    entry_number: str
    entry_date: date
    description: str
    amount: Decimal
    lines: tuple[GeneratedLine, ...]

    @property
    def total_debit(self) -> Decimal:
        return sum((l.debit_amount for l in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((l.credit_amount for l in self.lines), Decimal("0"))


def format_entry_number(sequence: int) -> str:
    return f"JE-{sequence:06d}"


def random_amount(rng: random.Random, template: TransactionTemplate) -> Decimal:
    raw = rng.uniform(template.min_amount, template.max_amount)
    return Decimal(str(raw)).quantize(CENT, rounding=ROUND_HALF_UP)


def build_entry(
    sequence: int,
    template: TransactionTemplate,
    accounts: Mapping[str, uuid.UUID],
    rng: random.Random,
    today: date,
) -> GeneratedEntry | None:
    """Build one balanced entry, or ``None`` if a template account is missing."""
    debit_id = accounts.get(template.debit_account)
    credit_id = accounts.get(template.credit_account)
    if debit_id is None or credit_id is None:
        return None

    amount = random_amount(rng, template)
    entry_date = today - timedelta(days=rng.randrange(LOOKBACK_DAYS))
    return GeneratedEntry(
        entry_number=format_entry_number(sequence),
        entry_date=entry_date,
        description=template.description,
        amount=amount,
        lines=(
            GeneratedLine(1, debit_id, amount, Decimal("0")),
            GeneratedLine(2, credit_id, Decimal("0"), amount),
        ),
    )


def generate_batches(
    accounts: Mapping[str, uuid.UUID],
    count: int = 1000,
    batch_size: int = 50,
    rng: random.Random | None = None,
    today: date | None = None,
) -> Iterator[list[GeneratedEntry]]:
    """Yield batches of entries numbered ``1..count``.

    A template is picked uniformly per sequence number; sequences whose
    template references an unknown account are dropped, so a batch may hold
    fewer than ``batch_size`` entries.
    """
    rng = rng or random.Random()
    today = today or date.today()

    for start in range(0, count, batch_size):
        batch = []
        for sequence in range(start + 1, min(start + batch_size, count) + 1):
            template = rng.choice(TRANSACTION_TEMPLATES)
            entry = build_entry(sequence, template, accounts, rng, today)
            if entry is not None:
                batch.append(entry)
        yield batch
