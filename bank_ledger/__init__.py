"""
Bank Ledger

An in-memory bank account ledger with credential-gated access,
account-type-specific balance rules and an append-only, hash-chained
transaction history.
"""

__version__ = "1.0.0"
