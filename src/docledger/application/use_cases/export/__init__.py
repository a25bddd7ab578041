"""Export use cases."""
