"""Tests for the embeddings factory and the OpenAI provider."""

from unittest.mock import patch

import pytest

from embeddings.registry import build_provider


@pytest.fixture
def openai_embeddings():
    with patch("embeddings.openai_embedder.OpenAIEmbeddings") as cls:
        cls.return_value.embed_documents.return_value = [[0.1, 0.2], [0.3, 0.4]]
        cls.return_value.embed_query.return_value = [0.5, 0.6]
        yield cls


def test_default_provider_has_no_retries(monkeypatch, openai_embeddings):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    provider = build_provider()

    assert provider.model == "text-embedding-3-small"
    assert provider.dimension == 1536
    kwargs = openai_embeddings.call_args.kwargs
    assert kwargs["max_retries"] == 0
    assert "dimensions" not in kwargs


def test_texts_and_query_use_same_model(monkeypatch, openai_embeddings):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    provider = build_provider("OpenAI", dimensions=512)

    result = provider.embed_texts(["a", "b"])

    assert result.vectors == [[0.1, 0.2], [0.3, 0.4]]
    assert (result.model, result.dimension, result.provider) == ("text-embedding-3-small", 512, "openai")
    assert provider.embed_query("q") == [0.5, 0.6]
    assert openai_embeddings.call_args.kwargs["dimensions"] == 512


def test_missing_key(monkeypatch, openai_embeddings):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(EnvironmentError):
        build_provider()


@pytest.mark.parametrize("kwargs", [{"model": "text-embedding-ada-001"}, {"dimensions": 4096}, {"dimensions": 0}])
def test_invalid_configuration(monkeypatch, openai_embeddings, kwargs):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with pytest.raises(ValueError):
        build_provider(**kwargs)


def test_unknown_provider():
    with pytest.raises(ValueError, match="Unknown embeddings provider"):
        build_provider("voyage")
