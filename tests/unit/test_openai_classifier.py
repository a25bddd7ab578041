"""Unit tests for the OpenAI-compatible classifier adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from openai import APIConnectionError

from docledger.domain.value_objects import DocumentType
from docledger.infrastructure.classification import (
    OpenAIDocumentClassifier,
    UnavailableClassifier,
)
from docledger.infrastructure.classification.openai_classifier import (
    SYSTEM_PROMPT,
    build_user_prompt,
    parse_label,
)


def _response(content: str | None):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _classifier_with(create: AsyncMock) -> OpenAIDocumentClassifier:
    classifier = OpenAIDocumentClassifier(
        base_url="http://localhost:9/v1", api_key="test", model="test-model"
    )
    classifier._client = SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create))
    )
    return classifier


def test_prompt_lists_every_category() -> None:
    for doc_type in DocumentType:
        assert f'"{doc_type.value}"' in SYSTEM_PROMPT


def test_user_prompt_contains_name_and_excerpt() -> None:
    prompt = build_user_prompt("gstr.pdf", "GSTIN 27AAA")
    assert "gstr.pdf" in prompt and "GSTIN 27AAA" in prompt


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('{"type": "Bank Statement"}', DocumentType.BANK_STATEMENT),
        ('{"type": "invoice"}', DocumentType.INVOICE),
        ('{"type": "Poetry"}', DocumentType.OTHER),
        ('{"kind": "Invoice"}', DocumentType.OTHER),
        ('["Invoice"]', DocumentType.OTHER),
        ("not json", DocumentType.OTHER),
        (None, DocumentType.OTHER),
    ],
)
def test_parse_label(raw: str | None, expected: DocumentType) -> None:
    assert parse_label(raw) == expected


@pytest.mark.asyncio
async def test_classify_sends_model_and_parses_reply() -> None:
    create = AsyncMock(return_value=_response('{"type": "GSTR-2B"}'))
    result = await _classifier_with(create).classify("2b.xlsx", "ITC available")
    assert result == DocumentType.GSTR_2B
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "2b.xlsx" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_classify_api_error_is_other() -> None:
    create = AsyncMock(side_effect=APIConnectionError(request=None))
    assert await _classifier_with(create).classify("a.pdf", "x") == DocumentType.OTHER


@pytest.mark.asyncio
async def test_classify_empty_choices_is_other() -> None:
    create = AsyncMock(return_value=SimpleNamespace(choices=[]))
    assert await _classifier_with(create).classify("a.pdf", "x") == DocumentType.OTHER


@pytest.mark.asyncio
async def test_unavailable_classifier() -> None:
    assert await UnavailableClassifier().classify("a.pdf", "x") == DocumentType.OTHER
