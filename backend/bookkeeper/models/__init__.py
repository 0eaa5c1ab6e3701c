from bookkeeper.models.audit import AuditLog
from bookkeeper.models.custom_field import CustomFieldDefinition
from bookkeeper.models.gl import Account, AccountType, JournalEntry, JournalEntryLine
from bookkeeper.models.org import FiscalPeriod, Organization

__all__ = [
    # Organizational structure
    "Organization",
    "FiscalPeriod",
    # General Ledger
    "AccountType",
    "Account",
    "JournalEntry",
    "JournalEntryLine",
    # Metadata
    "CustomFieldDefinition",
    # Audit
    "AuditLog",
]
