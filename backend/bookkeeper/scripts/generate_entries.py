"""Populate an organization with synthetic posted journal entries.

Usage::

    generate-entries --org-id 550e8400-e29b-41d4-a716-446655440000 --count 1000

Entries are inserted one transaction each (header + both lines), so an
interrupted run never leaves a half-written entry.  Re-running skips entry
numbers that already exist for the organization.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import uuid

from sqlalchemy import text
from sqlalchemy.engine import Engine

from bookkeeper.config import settings
from bookkeeper.services.entry_generator import GeneratedEntry, generate_batches

logger = logging.getLogger(__name__)

_SELECT_ACCOUNTS = text(
    "SELECT id, account_number FROM accounts "
    "WHERE organization_id = :org_id ORDER BY account_number"
)

_INSERT_ENTRY = text(
    "INSERT INTO journal_entries "
    "(organization_id, entry_date, entry_number, description, status, posted_at) "
    "VALUES (:org_id, :entry_date, :entry_number, :description, 'posted', NOW()) "
    "ON CONFLICT (organization_id, entry_number) DO NOTHING "
    "RETURNING id"
)

_INSERT_LINE = text(
    "INSERT INTO journal_entry_lines "
    "(journal_entry_id, account_id, debit_amount, credit_amount, currency, line_number) "
    "VALUES (:entry_id, :account_id, :debit, :credit, :currency, :line_number)"
)

_COUNT_ENTRIES = text(
    "SELECT COUNT(*) FROM journal_entries WHERE organization_id = :org_id"
)


def load_accounts(engine: Engine, org_id: uuid.UUID) -> dict[str, uuid.UUID]:
    """Map account number -> account id for the organization."""
    with engine.connect() as conn:
        rows = conn.execute(_SELECT_ACCOUNTS, {"org_id": org_id}).all()
    return {row.account_number: row.id for row in rows}


def insert_entry(engine: Engine, org_id: uuid.UUID, entry: GeneratedEntry) -> bool:
    """Insert one entry with its lines.  Returns ``False`` if the number already exists."""
    with engine.begin() as conn:
        entry_id = conn.execute(
            _INSERT_ENTRY,
            {
                "org_id": org_id,
                "entry_date": entry.entry_date,
                "entry_number": entry.entry_number,
                "description": entry.description,
            },
        ).scalar_one_or_none()
        if entry_id is None:
            return False

        conn.execute(
            _INSERT_LINE,
            [
                {
                    "entry_id": entry_id,
                    "account_id": line.account_id,
                    "debit": line.debit_amount,
                    "credit": line.credit_amount,
                    "currency": line.currency,
                    "line_number": line.line_number,
                }
                for line in entry.lines
            ],
        )
    return True


def run(
    engine: Engine,
    org_id: uuid.UUID,
    count: int = 1000,
    batch_size: int = 50,
    seed: int | None = None,
) -> int:
    """Generate and insert entries; returns how many were created."""
    accounts = load_accounts(engine, org_id)
    if not accounts:
        raise RuntimeError(f"No accounts found for organization {org_id}")

    logger.info(f"Found {len(accounts)} accounts, generating {count} journal entries")

    created = 0
    total_batches = -(-count // batch_size)
    batches = generate_batches(accounts, count, batch_size, rng=random.Random(seed))
    for batch_no, batch in enumerate(batches, start=1):
        for entry in batch:
            if insert_entry(engine, org_id, entry):
                created += 1
            else:
                logger.debug(f"Skipping existing entry {entry.entry_number}")
        logger.info(f"Batch {batch_no}/{total_batches} complete ({created} entries created so far)")

    with engine.connect() as conn:
        total = conn.execute(_COUNT_ENTRIES, {"org_id": org_id}).scalar_one()
    logger.info(f"Created {created} journal entries; {total} in database for organization")
    return created


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate synthetic journal entries.")
    parser.add_argument("--org-id", type=uuid.UUID, default=uuid.UUID(settings.DEMO_ORG_ID))
    parser.add_argument("--count", type=int, default=1000)
    parser.add_argument("--batch-size", type=int, default=50)
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible data")
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)

    from bookkeeper.database import create_sync_engine

    engine = create_sync_engine()
    try:
        run(engine, args.org_id, args.count, args.batch_size, args.seed)
    except Exception:
        logger.exception("Journal entry generation failed")
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
