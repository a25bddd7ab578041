"""docledger - document ingestion pipeline with idempotent ledger posting."""

__version__ = "0.1.0"
