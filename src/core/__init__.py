"""Core domain package for the results ledger.

Core contains result extraction, scoring, ranking, and idempotence logic
without any Telegram or storage-specific code, keeping the business logic
portable.
"""
