"""Ledger posting use cases."""
