from __future__ import annotations
from dataclasses import dataclass
from typing import List, Protocol


@dataclass
class EmbeddingResult:
    vectors: List[List[float]]   # one vector per input text
    model: str                   # e.g., "text-embedding-3-small"
    dimension: int               # e.g., 1536
    provider: str                # e.g., "openai"


class EmbeddingsProvider(Protocol):
    """
    Minimal provider-agnostic interface.

    Ingestion (``embed_texts``) and retrieval (``embed_query``) must go
    through the same provider instance configuration, otherwise stored
    chunk vectors and query vectors live in different spaces.
    """
    model: str
    dimension: int

    def embed_texts(self, texts: List[str]) -> EmbeddingResult:
        ...

    def embed_query(self, text: str) -> List[float]:
        ...
