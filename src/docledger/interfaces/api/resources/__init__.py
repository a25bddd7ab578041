"""Falcon resources."""
