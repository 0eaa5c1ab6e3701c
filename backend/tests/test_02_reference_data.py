"""
Reference data, demo accounts and reports.

Tests 201-243.
"""
import pytest

from bookkeeper import demo_data
from bookkeeper.models.gl import AccountType

ORG = "550e8400-e29b-41d4-a716-446655440000"

EXPECTED_FIRST_ROWS = {
    "skr03": {"number": "1000", "name": "Kasse", "type": "asset", "category": "current-asset"},
    "skr04": {"number": "0100", "name": "Kasse", "type": "asset", "category": "current-asset"},
    "ifrs": {"number": "1010", "name": "Cash and Cash Equivalents", "type": "asset", "category": "current-asset"},
    "us-gaap": {"number": "1010", "name": "Cash", "type": "asset", "category": "current-asset"},
    "uk-gaap": {"number": "1000", "name": "Cash at Bank", "type": "asset", "category": "current-asset"},
}


class TestAccountFrameworks:

    async def test_201_list_frameworks(self, client):
        r = await client.get("/api/account-frameworks")
        assert r.status_code == 200
        ids = [f["id"] for f in r.json()]
        assert ids == ["skr03", "skr04", "ifrs", "us-gaap", "uk-gaap"]

    @pytest.mark.parametrize("framework_id", list(EXPECTED_FIRST_ROWS))
    async def test_202_framework_fixture(self, client, framework_id):
        """Each known framework returns its fixed 7-row fixture."""
        r = await client.get(f"/api/account-frameworks/{framework_id}")
        assert r.status_code == 200
        rows = r.json()
        assert len(rows) == 7
        assert rows == demo_data.FRAMEWORK_ACCOUNTS[framework_id]
        assert rows[0] == EXPECTED_FIRST_ROWS[framework_id]
        assert {row["type"] for row in rows} == {"asset", "liability", "equity", "revenue", "expense"}

    @pytest.mark.parametrize("framework_id", ["SKR03", "gaap", "unknown", "0"])
    async def test_203_unknown_framework_is_empty(self, client, framework_id):
        r = await client.get(f"/api/account-frameworks/{framework_id}")
        assert r.status_code == 200
        assert r.json() == []


class TestCurrenciesAndRates:

    async def test_211_currencies(self, client):
        r = await client.get("/api/currencies")
        currencies = r.json()
        assert len(currencies) == 13
        jpy = next(c for c in currencies if c["code"] == "JPY")
        assert jpy["decimals"] == 0
        assert all(c["isActive"] for c in currencies)

    async def test_212_known_rate(self, client):
        r = await client.get("/api/exchange-rates", params={"from": "USD", "to": "EUR", "date": "2025-03-01"})
        assert r.status_code == 200
        [rate] = r.json()
        assert rate["fromCurrency"] == "USD"
        assert rate["toCurrency"] == "EUR"
        assert rate["rate"] == 0.92
        assert rate["date"] == "2025-03-01"
        assert rate["source"] == "DEMO"

    async def test_213_unknown_pair_defaults_to_one(self, client):
        r = await client.get("/api/exchange-rates", params={"from": "SEK", "to": "CZK"})
        [rate] = r.json()
        assert rate["rate"] == 1.0
        assert rate["date"]

    async def test_214_post_rates_acknowledged(self, client):
        r = await client.post("/api/exchange-rates", json=[{"from": "USD", "to": "EUR", "rate": 0.9}])
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Exchange rates updated"}


class TestAccountTypes:

    async def test_221_account_types_from_database(self, client, db):
        db.queue(
            AccountType(id=1, code="CASH", name="Cash", category="ASSET",
                        normal_balance="DEBIT", is_balance_sheet=True, display_order=1),
            AccountType(id=4, code="REV", name="Sales Revenue", category="REVENUE",
                        normal_balance="CREDIT", is_balance_sheet=False, display_order=4),
        )
        r = await client.get("/api/account-types")
        assert r.status_code == 200
        assert r.json()[1] == {
            "id": 4,
            "code": "REV",
            "name": "Sales Revenue",
            "category": "REVENUE",
            "normalBalance": "CREDIT",
            "isBalanceSheet": False,
            "displayOrder": 4,
        }
        assert "ORDER BY account_types.display_order" in str(db.statements[0])


class TestDemoAccount:

    async def test_231_get_account_echoes_id(self, client):
        r = await client.get("/api/accounts/123")
        assert r.status_code == 200
        data = r.json()
        assert data["id"] == "123"
        assert data["accountNumber"] == "1000"
        assert data["accountName"] == "Cash"
        assert data["accountType"] == "asset"
        assert data["currency"] == "USD"
        assert data["balance"] == 50000.00
        assert data["organizationId"] == ORG
        assert data["createdAt"] == "2024-01-01T00:00:00Z"
        assert data["updatedAt"]

    async def test_232_put_merges_body(self, client):
        r = await client.put("/api/accounts/123", json={"accountName": "Petty Cash", "id": "999"})
        data = r.json()
        assert data["id"] == "123"
        assert data["accountName"] == "Petty Cash"
        assert data["accountNumber"] == "1000"

    async def test_233_delete(self, client):
        r = await client.delete("/api/accounts/123")
        assert r.json() == {"success": True, "message": "Account deleted"}

    async def test_234_organization_accounts_fixture(self, client):
        r = await client.get(f"/api/organizations/{ORG}/accounts")
        accounts = r.json()
        assert [a["accountNumber"] for a in accounts] == ["1000", "1200", "2000", "4000", "5000"]
        assert accounts[2]["accountType"]["normalBalance"] == "CREDIT"


class TestReports:

    async def test_241_trial_balance(self, client):
        rows = (await client.get(f"/api/organizations/{ORG}/reports/trial-balance")).json()
        assert len(rows) == 8
        for row in rows:
            assert row["balance"] == row["totalDebits"] - row["totalCredits"]
        payables = next(r for r in rows if r["accountNumber"] == "2000")
        assert payables["balance"] == -10000.00

    async def test_242_balance_sheet(self, client):
        rows = (await client.get(f"/api/organizations/{ORG}/reports/balance-sheet")).json()
        assets = sum(r["balance"] for r in rows if r["category"] == "Asset")
        other = sum(r["balance"] for r in rows if r["category"] != "Asset")
        assert assets == other == 90000.00

    async def test_243_profit_loss(self, client):
        rows = (await client.get(f"/api/organizations/{ORG}/reports/profit-loss")).json()
        assert len(rows) == 10
        assert {r["category"] for r in rows} == {"Revenue", "Cost of Goods Sold", "Operating Expenses"}
