"""Atomic writes and the audit ledger."""
