"""
Static demo fixtures served by the read-only reference endpoints.

Chart-of-accounts frameworks, currencies, demo exchange rates, the demo
account/organization objects and the canned report rows all live here so the
routers stay free of literal data.
"""
from __future__ import annotations

from typing import Any

DEMO_ORG_ID = "550e8400-e29b-41d4-a716-446655440000"

# ---------------------------------------------------------------------------
# Chart-of-accounts frameworks
# ---------------------------------------------------------------------------

ACCOUNT_FRAMEWORKS: list[dict[str, Any]] = [
    {
        "id": "skr03",
        "name": "SKR 03",
        "country": "DE",
        "description": "Standard Chart of Accounts for Trade and Service Companies (Germany)",
        "accountCount": 95,
    },
    {
        "id": "skr04",
        "name": "SKR 04",
        "country": "DE",
        "description": "Standard Chart of Accounts for Industrial Companies (Germany)",
        "accountCount": 102,
    },
    {
        "id": "ifrs",
        "name": "IFRS",
        "country": "INT",
        "description": "International Financial Reporting Standards Chart of Accounts",
        "accountCount": 78,
    },
    {
        "id": "us-gaap",
        "name": "US GAAP",
        "country": "US",
        "description": "Generally Accepted Accounting Principles (United States)",
        "accountCount": 85,
    },
    {
        "id": "uk-gaap",
        "name": "UK GAAP",
        "country": "GB",
        "description": "Generally Accepted Accounting Practice (United Kingdom)",
        "accountCount": 72,
    },
]


def _acct(number: str, name: str, type_: str, category: str) -> dict[str, str]:
    return {"number": number, "name": name, "type": type_, "category": category}


FRAMEWORK_ACCOUNTS: dict[str, list[dict[str, str]]] = {
    "skr03": [
        _acct("1000", "Kasse", "asset", "current-asset"),
        _acct("1200", "Bank", "asset", "current-asset"),
        _acct("1400", "Forderungen", "asset", "current-asset"),
        _acct("2000", "Verbindlichkeiten", "liability", "current-liability"),
        _acct("3000", "Eigenkapital", "equity", "equity"),
        _acct("4000", "Umsatzerlöse", "revenue", "operating-revenue"),
        _acct("5000", "Betriebliche Aufwendungen", "expense", "operating-expense"),
    ],
    "skr04": [
        _acct("0100", "Kasse", "asset", "current-asset"),
        _acct("0200", "Bank", "asset", "current-asset"),
        _acct("0300", "Forderungen aus Lieferungen", "asset", "current-asset"),
        _acct("3000", "Verbindlichkeiten", "liability", "current-liability"),
        _acct("2000", "Eigenkapital", "equity", "equity"),
        _acct("5000", "Umsatzerlöse", "revenue", "operating-revenue"),
        _acct("6000", "Aufwendungen", "expense", "operating-expense"),
    ],
    "ifrs": [
        _acct("1010", "Cash and Cash Equivalents", "asset", "current-asset"),
        _acct("1020", "Trade Receivables", "asset", "current-asset"),
        _acct("1500", "Property, Plant & Equipment", "asset", "fixed-asset"),
        _acct("2010", "Trade Payables", "liability", "current-liability"),
        _acct("3000", "Share Capital", "equity", "equity"),
        _acct("4000", "Revenue from Contracts", "revenue", "operating-revenue"),
        _acct("5000", "Cost of Sales", "expense", "operating-expense"),
    ],
    "us-gaap": [
        _acct("1010", "Cash", "asset", "current-asset"),
        _acct("1020", "Accounts Receivable", "asset", "current-asset"),
        _acct("1500", "Fixed Assets", "asset", "fixed-asset"),
        _acct("2010", "Accounts Payable", "liability", "current-liability"),
        _acct("3000", "Common Stock", "equity", "equity"),
        _acct("4000", "Sales Revenue", "revenue", "operating-revenue"),
        _acct("5000", "Operating Expenses", "expense", "operating-expense"),
    ],
    "uk-gaap": [
        _acct("1000", "Cash at Bank", "asset", "current-asset"),
        _acct("1100", "Trade Debtors", "asset", "current-asset"),
        _acct("1500", "Fixed Assets", "asset", "fixed-asset"),
        _acct("2000", "Trade Creditors", "liability", "current-liability"),
        _acct("3000", "Share Capital", "equity", "equity"),
        _acct("4000", "Turnover", "revenue", "operating-revenue"),
        _acct("5000", "Operating Costs", "expense", "operating-expense"),
    ],
}

# ---------------------------------------------------------------------------
# Currencies & exchange rates
# ---------------------------------------------------------------------------

CURRENCIES: list[dict[str, Any]] = [
    {"code": code, "name": name, "symbol": symbol, "decimals": decimals, "isActive": True}
    for code, name, symbol, decimals in [
        ("USD", "US Dollar", "$", 2),
        ("EUR", "Euro", "€", 2),
        ("GBP", "British Pound", "£", 2),
        ("JPY", "Japanese Yen", "¥", 0),
        ("CHF", "Swiss Franc", "CHF", 2),
        ("CAD", "Canadian Dollar", "C$", 2),
        ("AUD", "Australian Dollar", "A$", 2),
        ("CNY", "Chinese Yuan", "¥", 2),
        ("SEK", "Swedish Krona", "kr", 2),
        ("NOK", "Norwegian Krone", "kr", 2),
        ("DKK", "Danish Krone", "kr", 2),
        ("PLN", "Polish Zloty", "zł", 2),
        ("CZK", "Czech Koruna", "Kč", 2),
    ]
]

# Keyed "FROM_TO"; unknown pairs fall back to 1.0
EXCHANGE_RATES: dict[str, float] = {
    "USD_EUR": 0.92,
    "USD_GBP": 0.79,
    "USD_JPY": 149.50,
    "USD_CHF": 0.88,
    "EUR_USD": 1.09,
    "EUR_GBP": 0.86,
    "EUR_JPY": 162.50,
    "GBP_USD": 1.27,
    "GBP_EUR": 1.16,
    "JPY_USD": 0.0067,
}

# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

DEMO_ACCOUNT: dict[str, Any] = {
    "organizationId": DEMO_ORG_ID,
    "accountNumber": "1000",
    "accountName": "Cash",
    "accountTypeId": 1,
    "accountType": "asset",
    "currency": "USD",
    "balance": 50000.00,
    "description": "Cash on hand and in bank",
    "isSystemAccount": False,
    "isActive": True,
    "createdAt": "2024-01-01T00:00:00Z",
}

_ACCOUNT_TYPES = {
    1: ("CASH", "Cash", "ASSET", "DEBIT", True),
    2: ("AR", "Accounts Receivable", "ASSET", "DEBIT", True),
    3: ("AP", "Accounts Payable", "LIABILITY", "CREDIT", True),
    4: ("REV", "Sales Revenue", "REVENUE", "CREDIT", False),
    5: ("EXP", "Operating Expenses", "EXPENSE", "DEBIT", False),
}


def _org_account(id_: int, number: str, name: str, balance: float) -> dict[str, Any]:
    code, type_name, category, normal_balance, balance_sheet = _ACCOUNT_TYPES[id_]
    return {
        "id": str(id_),
        "organizationId": DEMO_ORG_ID,
        "accountNumber": number,
        "accountName": name,
        "accountTypeId": id_,
        "accountType": {
            "id": id_,
            "code": code,
            "name": type_name,
            "category": category,
            "normalBalance": normal_balance,
            "isBalanceSheet": balance_sheet,
            "displayOrder": id_,
        },
        "currency": "USD",
        "balance": balance,
        "isSystemAccount": False,
        "isActive": True,
    }


ORGANIZATION_ACCOUNTS: list[dict[str, Any]] = [
    _org_account(1, "1000", "Cash", 50000),
    _org_account(2, "1200", "Accounts Receivable", 35000),
    _org_account(3, "2000", "Accounts Payable", 22000),
    _org_account(4, "4000", "Sales Revenue", 62000),
    _org_account(5, "5000", "Operating Expenses", 38200),
]

DEMO_ORGANIZATION: dict[str, Any] = {
    "id": DEMO_ORG_ID,
    "name": "Demo Company",
    "countryCode": "US",
    "defaultCurrency": "USD",
    "defaultTimezone": "America/New_York",
    "fiscalYearStart": 1,
    "fiscalYearEnd": 12,
}

# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def _tb(number: str, name: str, category: str, normal: str, debits: float, credits: float) -> dict[str, Any]:
    return {
        "accountId": f"acc-{number}",
        "accountNumber": number,
        "accountName": name,
        "accountCategory": category,
        "normalBalance": normal,
        "totalDebits": debits,
        "totalCredits": credits,
        "balance": debits - credits,
    }


TRIAL_BALANCE: list[dict[str, Any]] = [
    _tb("1000", "Cash", "Asset", "DEBIT", 25000.00, 0),
    _tb("1200", "Accounts Receivable", "Asset", "DEBIT", 15000.00, 0),
    _tb("1500", "Equipment", "Asset", "DEBIT", 50000.00, 0),
    _tb("2000", "Accounts Payable", "Liability", "CREDIT", 0, 10000.00),
    _tb("3000", "Owner's Equity", "Equity", "CREDIT", 0, 60000.00),
    _tb("4000", "Revenue", "Revenue", "CREDIT", 0, 35000.00),
    _tb("5000", "Cost of Goods Sold", "Expense", "DEBIT", 12000.00, 0),
    _tb("6000", "Operating Expenses", "Expense", "DEBIT", 8000.00, 0),
]

BALANCE_SHEET: list[dict[str, Any]] = [
    {"category": category, "accountTypeName": type_name, "accountNumber": number,
     "accountName": name, "balance": balance}
    for category, type_name, number, name, balance in [
        ("Asset", "Current Assets", "1000", "Cash", 25000.00),
        ("Asset", "Current Assets", "1200", "Accounts Receivable", 15000.00),
        ("Asset", "Fixed Assets", "1500", "Equipment", 50000.00),
        ("Liability", "Current Liabilities", "2000", "Accounts Payable", 10000.00),
        ("Liability", "Current Liabilities", "2100", "Accrued Expenses", 5000.00),
        ("Equity", "Owner's Equity", "3000", "Capital", 60000.00),
        ("Equity", "Retained Earnings", "3100", "Retained Earnings", 15000.00),
    ]
]

PROFIT_LOSS: list[dict[str, Any]] = [
    {"category": category, "subcategory": subcategory, "accountNumber": number,
     "accountName": name, "amount": amount}
    for category, subcategory, number, name, amount in [
        ("Revenue", "Sales", "4000", "Product Sales", 30000.00),
        ("Revenue", "Sales", "4100", "Service Revenue", 15000.00),
        ("Revenue", "Other Income", "4900", "Interest Income", 500.00),
        ("Cost of Goods Sold", "Direct Costs", "5000", "Product Costs", 12000.00),
        ("Cost of Goods Sold", "Direct Costs", "5100", "Service Costs", 5000.00),
        ("Operating Expenses", "General & Administrative", "6000", "Salaries", 15000.00),
        ("Operating Expenses", "General & Administrative", "6100", "Rent", 3000.00),
        ("Operating Expenses", "Marketing", "6200", "Advertising", 2000.00),
        ("Operating Expenses", "General & Administrative", "6300", "Utilities", 800.00),
        ("Operating Expenses", "General & Administrative", "6400", "Office Supplies", 500.00),
    ]
]

# ---------------------------------------------------------------------------
# DATEV export
# ---------------------------------------------------------------------------

DATEV_BOOKINGS: list[dict[str, Any]] = [
    {"amount": amount, "side": side, "currency": "EUR", "account": account,
     "contraAccount": contra, "voucher": voucher, "text": text}
    for amount, side, account, contra, voucher, text in [
        (25000.00, "S", "1000", "3000", "EÖ-001", "Eröffnungsbuchung Kasse"),
        (15000.00, "S", "1200", "4000", "RE-001", "Umsatzerlöse"),
        (50000.00, "S", "1500", "3000", "AN-001", "Anschaffung Equipment"),
        (10000.00, "H", "2000", "6000", "RE-002", "Wareneinkauf"),
        (8000.00, "S", "6100", "1000", "BE-001", "Betriebsausgaben"),
    ]
]
