"""Unit tests for content hashing and document ids."""

import hashlib

import pytest

from docledger.domain.entities import make_document_id
from docledger.domain.value_objects import ContentHash


def test_hash_of_empty_bytes() -> None:
    assert (
        str(ContentHash.of(b""))
        == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_hash_matches_sha256_lowercase_hex() -> None:
    data = b"Invoice INV-1\n"
    h = ContentHash.of(data)
    assert h.value == hashlib.sha256(data).hexdigest()
    assert h.value == h.value.lower()
    assert len(h.value) == 64


def test_hash_is_deterministic() -> None:
    assert ContentHash.of(b"abc") == ContentHash.of(b"abc")
    assert ContentHash.of(b"abc") != ContentHash.of(b"abd")


def test_rejects_malformed_value() -> None:
    with pytest.raises(ValueError):
        ContentHash("not-a-hash")


def test_document_id_joins_name_and_hash() -> None:
    h = ContentHash.of(b"x")
    assert make_document_id("a.csv", h) == f"a.csv-{h.value}"


def test_same_bytes_different_names_give_different_ids() -> None:
    h = ContentHash.of(b"same")
    assert make_document_id("a.csv", h) != make_document_id("b.csv", h)
