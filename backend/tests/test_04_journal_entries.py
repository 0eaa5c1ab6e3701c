"""
Journal entries: balance validation, creation and listing.

Tests 401-430.
"""
import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from bookkeeper.models.gl import Account, JournalEntry, JournalEntryLine
from bookkeeper.models.org import FiscalPeriod
from bookkeeper.routes.journal import JournalLineIn, check_balanced

ORG = uuid.UUID("550e8400-e29b-41d4-a716-446655440000")
CASH = uuid.uuid4()
REVENUE = uuid.uuid4()
URL = f"/api/organizations/{ORG}/journal-entries"


def line(account_id, debit=0, credit=0):
    return JournalLineIn(account_id=account_id, debit_amount=Decimal(str(debit)), credit_amount=Decimal(str(credit)))


def make_account(account_id, number, name):
    return Account(id=account_id, organization_id=ORG, account_number=number, account_name=name, account_type_id=1)


def entry_body(**overrides):
    body = {
        "entryNumber": "JE-000042",
        "entryDate": "2025-02-10",
        "description": "Cash sale",
        "lines": [
            {"accountId": str(CASH), "debitAmount": "1250.00"},
            {"accountId": str(REVENUE), "creditAmount": "1250.00"},
        ],
    }
    body.update(overrides)
    return body


class TestBalanceRules:

    def test_401_balanced_entry_returns_totals(self):
        totals = check_balanced([line(CASH, debit=100), line(REVENUE, credit=60), line(REVENUE, credit=40)])
        assert totals == (Decimal("100"), Decimal("100"))

    def test_402_single_line_rejected(self):
        with pytest.raises(HTTPException) as exc:
            check_balanced([line(CASH, debit=100)])
        assert exc.value.status_code == 422

    @pytest.mark.parametrize("lines", [
        [line(CASH, debit=100, credit=100), line(REVENUE, credit=0)],
        [line(CASH), line(REVENUE, credit=0)],
        [line(CASH, debit=-5), line(REVENUE, credit=-5)],
    ])
    def test_403_malformed_lines_rejected(self, lines):
        with pytest.raises(HTTPException) as exc:
            check_balanced(lines)
        assert exc.value.status_code == 422

    def test_404_unequal_totals_rejected(self):
        with pytest.raises(HTTPException) as exc:
            check_balanced([line(CASH, debit="100.00"), line(REVENUE, credit="99.99")])
        assert "must equal" in exc.value.detail


class TestCreateJournalEntry:

    async def test_411_unbalanced_entry_is_422(self, client, db):
        body = entry_body(lines=[
            {"accountId": str(CASH), "debitAmount": "1250.00"},
            {"accountId": str(REVENUE), "creditAmount": "1000.00"},
        ])
        r = await client.post(URL, json=body)
        assert r.status_code == 422
        assert r.json() == {"error": "Debits (1250.00) must equal credits (1000.00)"}
        assert db.statements == []
        assert db.added == []

    async def test_412_create_balanced_entry(self, client, db):
        db.queue()  # no closed period
        db.queue(make_account(CASH, "1000", "Cash"), make_account(REVENUE, "4000", "Sales Revenue"))

        r = await client.post(URL, json=entry_body())
        assert r.status_code == 201
        data = r.json()
        assert data["entryNumber"] == "JE-000042"
        assert data["status"] == "draft"
        assert data["postedAt"] is None
        assert data["totalDebit"] == data["totalCredit"] == 1250.00
        assert [l["lineNumber"] for l in data["lines"]] == [1, 2]
        assert data["lines"][1]["account"] == {"accountNumber": "4000", "accountName": "Sales Revenue"}

        [je] = db.added
        assert len(je.lines) == 2
        assert db.commits == 1

    async def test_413_posted_entry_gets_posted_at(self, client, db):
        db.queue()
        db.queue(make_account(CASH, "1000", "Cash"), make_account(REVENUE, "4000", "Sales Revenue"))
        r = await client.post(URL, json=entry_body(status="posted"))
        assert r.status_code == 201
        assert r.json()["postedAt"].endswith("+00:00")

    async def test_414_entry_number_generated_when_missing(self, client, db):
        db.queue()
        db.queue(make_account(CASH, "1000", "Cash"), make_account(REVENUE, "4000", "Sales Revenue"))
        db.queue(41)
        body = entry_body()
        del body["entryNumber"]
        r = await client.post(URL, json=body)
        assert r.json()["entryNumber"] == "JE-000042"

    async def test_415_closed_period_rejects_entry(self, client, db):
        db.queue(FiscalPeriod(
            id=uuid.uuid4(), organization_id=ORG, name="FY 2025 Q1",
            start_date=date(2025, 1, 1), end_date=date(2025, 3, 31), is_closed=True,
        ))
        r = await client.post(URL, json=entry_body())
        assert r.status_code == 422
        assert "FY 2025 Q1 is closed" in r.json()["error"]
        assert db.added == []

    async def test_416_unknown_account_rejected(self, client, db):
        db.queue()
        db.queue(make_account(CASH, "1000", "Cash"))
        r = await client.post(URL, json=entry_body())
        assert r.status_code == 422
        assert str(REVENUE) in r.json()["error"]

    async def test_417_duplicate_number_is_400(self, client, db):
        db.queue()
        db.queue(make_account(CASH, "1000", "Cash"), make_account(REVENUE, "4000", "Sales Revenue"))

        async def duplicate():
            raise IntegrityError("INSERT", {}, Exception("duplicate key value"))

        db.commit = duplicate
        r = await client.post(URL, json=entry_body())
        assert r.status_code == 400
        assert r.json()["error"] == "A journal entry with this number already exists"
        assert db.rollbacks == 1

    async def test_418_sub_cent_amounts_rejected(self, client, db):
        """Amounts are limited to two decimal places, like the stored columns."""
        body = entry_body(lines=[
            {"accountId": str(CASH), "debitAmount": "0.005"},
            {"accountId": str(CASH), "debitAmount": "0.005"},
            {"accountId": str(REVENUE), "creditAmount": "0.01"},
        ])
        r = await client.post(URL, json=body)
        assert r.status_code == 422
        assert "detail" in r.json()
        assert db.statements == []
        assert db.added == []

    async def test_419_two_decimal_amounts_accepted(self, client, db):
        db.queue()
        db.queue(make_account(CASH, "1000", "Cash"), make_account(REVENUE, "4000", "Sales Revenue"))
        body = entry_body(lines=[
            {"accountId": str(CASH), "debitAmount": "0.01"},
            {"accountId": str(CASH), "debitAmount": "0.01"},
            {"accountId": str(REVENUE), "creditAmount": "0.02"},
        ])
        r = await client.post(URL, json=body)
        assert r.status_code == 201
        assert r.json()["totalDebit"] == r.json()["totalCredit"] == 0.02


class TestListJournalEntries:

    async def test_421_entries_with_lines_and_totals(self, client, db):
        cash = make_account(CASH, "1000", "Cash")
        revenue = make_account(REVENUE, "4000", "Sales Revenue")
        je = JournalEntry(
            id=uuid.uuid4(), organization_id=ORG, entry_number="JE-000001",
            entry_date=date(2025, 1, 15), description="Initial revenue entry",
            status="posted", posted_at=datetime(2025, 1, 15, 9, 30), created_at=datetime(2025, 1, 15, 9, 0),
            lines=[
                JournalEntryLine(id=uuid.uuid4(), line_number=1, account_id=CASH, account=cash,
                                 debit_amount=Decimal("5000.00"), credit_amount=Decimal("0"), currency="USD"),
                JournalEntryLine(id=uuid.uuid4(), line_number=2, account_id=REVENUE, account=revenue,
                                 debit_amount=Decimal("0"), credit_amount=Decimal("5000.00"), currency="USD"),
            ],
        )
        db.queue(je)

        r = await client.get(URL)
        assert r.status_code == 200
        [entry] = r.json()
        assert entry["entryNumber"] == "JE-000001"
        assert entry["entryDate"] == "2025-01-15"
        assert entry["totalDebit"] == entry["totalCredit"] == 5000.00
        assert entry["lines"][0]["account"]["accountName"] == "Cash"
        assert entry["lines"][1]["creditAmount"] == 5000.00

        sql = str(db.statements[0])
        assert "ORDER BY journal_entries.entry_date DESC, journal_entries.entry_number DESC" in sql
        assert "LIMIT" in sql
