from __future__ import annotations
import os
from typing import List
from dataclasses import dataclass
from langchain_openai import OpenAIEmbeddings
from .base import EmbeddingsProvider, EmbeddingResult

# Native vector width per model; v3 models can be shortened, never widened
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


@dataclass
class OpenAIConfig:
    model: str = "text-embedding-3-small"
    dimensions: int | None = None
    api_key_env: str = "OPENAI_API_KEY"

    def resolved_dimension(self) -> int:
        if self.model not in MODEL_DIMENSIONS:
            raise ValueError(f"Unsupported OpenAI embedding model: {self.model}")
        native = MODEL_DIMENSIONS[self.model]
        if self.dimensions is None:
            return native
        if not 0 < self.dimensions <= native:
            raise ValueError(
                f"dimensions must be between 1 and {native} for {self.model}, got {self.dimensions}"
            )
        return self.dimensions


class OpenAIProvider(EmbeddingsProvider):
    """
    Chunk and query embeddings for the tenant document store.

    One instance embeds both sides of retrieval, so stored chunk vectors
    and query vectors share model and width. Calls are made once; a failure
    surfaces to the caller (one chunk during ingestion, one request at
    query time).
    """

    def __init__(self, cfg: OpenAIConfig = OpenAIConfig()):
        api_key = os.getenv(cfg.api_key_env)
        if not api_key:
            raise EnvironmentError(
                f"{cfg.api_key_env} not set. Add it to your environment or .env file."
            )

        self.model = cfg.model
        self.dimension = cfg.resolved_dimension()
        options = {"dimensions": cfg.dimensions} if cfg.dimensions is not None else {}
        self._emb = OpenAIEmbeddings(model=cfg.model, api_key=api_key, max_retries=0, **options)

    def embed_texts(self, texts: List[str]) -> EmbeddingResult:
        return EmbeddingResult(
            vectors=self._emb.embed_documents(texts),
            model=self.model,
            dimension=self.dimension,
            provider="openai",
        )

    def embed_query(self, text: str) -> List[float]:
        return self._emb.embed_query(text)
