"""Exception types shared by the core and its adapters."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledger errors."""


class StorageError(LedgerError):
    """A storage backend failed to read or write ledger state."""


class ConfigError(LedgerError):
    """Configuration values are missing or invalid."""
