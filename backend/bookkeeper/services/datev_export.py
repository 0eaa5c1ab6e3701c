"""DATEV ASCII ("EXTF" Buchungsstapel) export of the demo bookings.

A file is one metadata header record, one column header record and one
record per booking, separated by ``;`` with CRLF line endings and a UTF-8
byte order mark so DATEV tools detect the encoding.
"""
from __future__ import annotations

import csv
import io
from datetime import date

from bookkeeper import demo_data

FORMAT_NAME = "EXTF"
FORMAT_VERSION = "510"
DATA_CATEGORY = "21"
DATA_CATEGORY_NAME = "Buchungsstapel"
CATEGORY_VERSION = "7"
HEADER_FIELD_COUNT = 30
BOM = "\ufeff"

DEFAULT_CONSULTANT_NUMBER = "1000"
DEFAULT_CLIENT_NUMBER = "10001"

COLUMNS = [
    "Umsatz (ohne Soll/Haben-Kz)",
    "Soll/Haben-Kennzeichen",
    "WKZ Umsatz",
    "Kurs",
    "Basis-Umsatz",
    "WKZ Basis-Umsatz",
    "Konto",
    "Gegenkonto (ohne BU-Schlüssel)",
    "BU-Schlüssel",
    "Belegdatum",
    "Belegfeld 1",
    "Belegfeld 2",
    "Skonto",
    "Buchungstext",
]


def compact_date(value: str | None) -> str:
    """``2025-01-31`` -> ``20250131``; missing dates stay empty."""
    return value.replace("-", "") if value else ""


def format_amount(amount: float) -> str:
    """German decimal notation without thousands separators."""
    return f"{amount:.2f}".replace(".", ",")


def header_record(
    consultant_number: str | None,
    client_number: str | None,
    date_from: str | None,
    date_to: str | None,
    today: date,
) -> list[str]:
    record = [
        FORMAT_NAME,
        FORMAT_VERSION,
        DATA_CATEGORY,
        DATA_CATEGORY_NAME,
        CATEGORY_VERSION,
        today.strftime("%Y%m%d"),
        "", "", "", "",
        consultant_number or DEFAULT_CONSULTANT_NUMBER,
        client_number or DEFAULT_CLIENT_NUMBER,
        "04",  # account number length
        compact_date(date_from),
        compact_date(date_to),
    ]
    return record + [""] * (HEADER_FIELD_COUNT - len(record))


def booking_records(date_from: str | None) -> list[list[str]]:
    voucher_date = compact_date(date_from)
    return [
        [
            format_amount(b["amount"]), b["side"], b["currency"], "", "", "",
            b["account"], b["contraAccount"], "", voucher_date,
            b["voucher"], "", "", b["text"],
        ]
        for b in demo_data.DATEV_BOOKINGS
    ]


def build_export(
    consultant_number: str | None = None,
    client_number: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    today: date | None = None,
) -> str:
    today = today or date.today()
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\r\n")
    writer.writerow(header_record(consultant_number, client_number, date_from, date_to, today))
    writer.writerow(COLUMNS)
    writer.writerows(booking_records(date_from))
    return BOM + buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    return f"DATEV_Export_{(today or date.today()).isoformat()}.csv"


def validation_report(today: date | None = None) -> dict:
    """Pre-export check; the demo bookings are always valid."""
    today = today or date.today()
    count = len(demo_data.DATEV_BOOKINGS)
    return {
        "valid": True,
        "errors": [],
        "warnings": [
            {
                "type": "INFO",
                "message": "Demo-Modus: Es werden nur Beispieldaten exportiert",
                "code": "DEMO_MODE",
            }
        ],
        "summary": {
            "totalEntries": count,
            "validEntries": count,
            "invalidEntries": 0,
            "dateRange": {
                "from": date(today.year, 1, 1).isoformat(),
                "to": today.isoformat(),
            },
        },
    }
