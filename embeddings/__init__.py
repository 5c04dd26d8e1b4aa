"""
Embeddings package for generating vector embeddings from text.
"""

from .base import EmbeddingsProvider, EmbeddingResult
from .registry import build_provider

__all__ = [
    'EmbeddingsProvider',
    'EmbeddingResult',
    'build_provider',
]
