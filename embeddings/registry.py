from __future__ import annotations
from typing import Any, Callable, Dict
from config import DEFAULT_EMBED_PROVIDER, DEFAULT_EMBED_MODEL, DEFAULT_EMBED_DIMENSIONS
from .base import EmbeddingsProvider
from .openai_embedder import OpenAIProvider, OpenAIConfig


def _openai(**kwargs: Any) -> EmbeddingsProvider:
    return OpenAIProvider(OpenAIConfig(
        model=kwargs.get("model", DEFAULT_EMBED_MODEL),
        dimensions=kwargs.get("dimensions", DEFAULT_EMBED_DIMENSIONS),
        api_key_env=kwargs.get("api_key_env", "OPENAI_API_KEY"),
    ))


PROVIDERS: Dict[str, Callable[..., EmbeddingsProvider]] = {
    "openai": _openai,
}


def build_provider(name: str = DEFAULT_EMBED_PROVIDER, **kwargs: Any) -> EmbeddingsProvider:
    """
    Embedder used by both ingestion and retrieval.

    Keyword overrides (``model``, ``dimensions``, ``api_key_env``) default
    to the values in ``config``.
    """
    key = (name or DEFAULT_EMBED_PROVIDER).lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unknown embeddings provider: {name}")
    return PROVIDERS[key](**kwargs)
