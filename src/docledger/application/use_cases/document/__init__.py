"""Document ingestion and processing use cases."""
