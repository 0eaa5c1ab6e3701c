"""
Synthetic journal entry generation and the seeding script.

Tests 801-830.
"""
import random
import uuid
from contextlib import contextmanager
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from bookkeeper.scripts import generate_entries
from bookkeeper.services.entry_generator import (
    TRANSACTION_TEMPLATES,
    build_entry,
    format_entry_number,
    generate_batches,
)

ORG = uuid.UUID("550e8400-e29b-41d4-a716-446655440000")
TODAY = date(2025, 6, 30)
ACCOUNT_NUMBERS = ["1000", "1200", "1500", "1800", "2000", "4000", "5000", "6000", "6100", "6200"]


@pytest.fixture
def accounts():
    return {number: uuid.uuid4() for number in ACCOUNT_NUMBERS}


def all_entries(accounts, **kwargs):
    kwargs.setdefault("rng", random.Random(7))
    kwargs.setdefault("today", TODAY)
    return [e for batch in generate_batches(accounts, **kwargs) for e in batch]


class TestGenerator:

    def test_801_entry_number_format(self):
        assert format_entry_number(1) == "JE-000001"
        assert format_entry_number(1000) == "JE-001000"

    def test_802_every_entry_balances(self, accounts):
        for entry in all_entries(accounts, count=300):
            assert entry.total_debit == entry.total_credit == entry.amount
            debit, credit = entry.lines
            assert debit.debit_amount > 0 and debit.credit_amount == 0
            assert credit.credit_amount > 0 and credit.debit_amount == 0
            assert [debit.line_number, credit.line_number] == [1, 2]

    def test_803_numbers_unique_and_sequential(self, accounts):
        numbers = [e.entry_number for e in all_entries(accounts, count=120, batch_size=50)]
        assert numbers == [format_entry_number(i) for i in range(1, 121)]

    def test_804_amounts_within_template_range(self, accounts):
        by_description = {t.description: t for t in TRANSACTION_TEMPLATES}
        for entry in all_entries(accounts, count=300):
            template = by_description[entry.description]
            assert template.min_amount <= entry.amount <= template.max_amount
            assert entry.amount == entry.amount.quantize(Decimal("0.01"))

    def test_805_dates_within_last_year(self, accounts):
        for entry in all_entries(accounts, count=300):
            assert TODAY - timedelta(days=365) < entry.entry_date <= TODAY

    def test_806_template_accounts_used(self, accounts):
        rent = next(t for t in TRANSACTION_TEMPLATES if t.description == "Rent Payment")
        entry = build_entry(5, rent, accounts, random.Random(1), TODAY)
        assert entry.lines[0].account_id == accounts["6000"]
        assert entry.lines[1].account_id == accounts["1000"]

    def test_807_missing_account_skips_entry(self, accounts):
        del accounts["6200"]
        salaries = next(t for t in TRANSACTION_TEMPLATES if t.description == "Salaries Payment")
        assert build_entry(1, salaries, accounts, random.Random(1), TODAY) is None
        assert all(e.description != "Salaries Payment" for e in all_entries(accounts, count=200))

    def test_808_batching(self, accounts):
        batches = list(generate_batches(accounts, count=1000, batch_size=50, rng=random.Random(3)))
        assert len(batches) == 20
        assert all(len(b) == 50 for b in batches)

    def test_809_short_last_batch(self, accounts):
        sizes = [len(b) for b in generate_batches(accounts, count=120, batch_size=50)]
        assert sizes == [50, 50, 20]

    def test_810_seeded_runs_repeat(self, accounts):
        first = all_entries(accounts, count=30, rng=random.Random(42))
        second = all_entries(accounts, count=30, rng=random.Random(42))
        assert first == second


# ---------------------------------------------------------------------------
# Seeding script against a recording engine
# ---------------------------------------------------------------------------

class FakeCursor:
    def __init__(self, rows=(), scalar=None):
        self._rows = list(rows)
        self._scalar = scalar

    def all(self):
        return self._rows

    def scalar_one_or_none(self):
        return self._scalar

    def scalar_one(self):
        return self._scalar


class FakeEngine:
    """Just enough of ``sqlalchemy.engine.Engine`` for the seeding script."""

    def __init__(self, accounts, existing=()):
        self.accounts = accounts
        self.entries = {number: uuid.uuid4() for number in existing}
        self.lines = []
        self.transactions = 0
        self.disposed = False

    @contextmanager
    def connect(self):
        yield self

    @contextmanager
    def begin(self):
        self.transactions += 1
        yield self

    def execute(self, stmt, params=None):
        if stmt is generate_entries._SELECT_ACCOUNTS:
            rows = [SimpleNamespace(id=i, account_number=n) for n, i in self.accounts.items()]
            return FakeCursor(rows)
        if stmt is generate_entries._INSERT_ENTRY:
            if params["entry_number"] in self.entries:
                return FakeCursor()
            entry_id = self.entries[params["entry_number"]] = uuid.uuid4()
            return FakeCursor(scalar=entry_id)
        if stmt is generate_entries._INSERT_LINE:
            self.lines.extend(params)
            return FakeCursor()
        if stmt is generate_entries._COUNT_ENTRIES:
            return FakeCursor(scalar=len(self.entries))
        raise AssertionError(f"unexpected statement {stmt}")

    def dispose(self):
        self.disposed = True


class TestSeedScript:

    def test_821_inserts_entries_and_lines(self, accounts):
        engine = FakeEngine(accounts)
        created = generate_entries.run(engine, ORG, count=100, batch_size=25, seed=1)
        assert created == 100
        assert len(engine.entries) == 100
        assert len(engine.lines) == 200
        assert engine.transactions == 100
        debits = sum(l["debit"] for l in engine.lines)
        credits = sum(l["credit"] for l in engine.lines)
        assert debits == credits

    def test_822_existing_numbers_skipped(self, accounts):
        engine = FakeEngine(accounts, existing=["JE-000001", "JE-000002"])
        created = generate_entries.run(engine, ORG, count=10, batch_size=5, seed=1)
        assert created == 8
        assert len(engine.lines) == 16

    def test_823_no_accounts_fails(self):
        with pytest.raises(RuntimeError, match="No accounts"):
            generate_entries.run(FakeEngine({}), ORG, count=10)

    def test_824_parser_defaults(self):
        args = generate_entries.build_parser().parse_args([])
        assert args.org_id == ORG
        assert args.count == 1000
        assert args.batch_size == 50
        assert args.seed is None

    def test_825_parser_overrides(self):
        org = uuid.uuid4()
        args = generate_entries.build_parser().parse_args(
            ["--org-id", str(org), "--count", "20", "--batch-size", "5", "--seed", "9"]
        )
        assert (args.org_id, args.count, args.batch_size, args.seed) == (org, 20, 5, 9)

    def test_826_main_builds_and_disposes_engine(self, accounts, monkeypatch):
        engine = FakeEngine(accounts)
        monkeypatch.setattr("bookkeeper.database.create_sync_engine", lambda: engine)
        assert generate_entries.main(["--count", "4", "--batch-size", "2", "--seed", "1"]) == 0
        assert len(engine.entries) == 4
        assert engine.disposed

    def test_827_main_reports_failure(self, monkeypatch):
        engine = FakeEngine({})
        monkeypatch.setattr("bookkeeper.database.create_sync_engine", lambda: engine)
        assert generate_entries.main(["--count", "4"]) == 1
        assert engine.disposed

    def test_828_sync_url_names_psycopg2(self):
        from sqlalchemy.engine import make_url

        from bookkeeper.config import Settings

        url = make_url(Settings.model_fields["DATABASE_URL_SYNC"].default)
        assert url.get_backend_name() == "postgresql"
        assert url.get_driver_name() == "psycopg2"
