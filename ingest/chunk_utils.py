from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
from langchain_core.documents import Document

from config import DEFAULT_CHUNK_SIZE, DEFAULT_CHUNK_OVERLAP


def window_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """
    Split text into consecutive fixed-size character windows.

    Window ``i`` starts at ``i * (chunk_size - chunk_overlap)``; the last
    window may be shorter. Empty text yields no windows, any other text
    yields ``max(1, ceil((len - overlap) / stride))`` windows whose union
    covers the whole text.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer")
    if not 0 <= chunk_overlap < chunk_size:
        raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
    if not text:
        return []

    stride = chunk_size - chunk_overlap
    # A window starting at or past len - overlap would only repeat the tail
    # of its predecessor.
    last_start = max(len(text) - chunk_overlap, 1)
    return [text[start:start + chunk_size] for start in range(0, last_start, stride)]


def chunk_documents(
    text: str,
    metadata: Optional[Dict[str, Any]] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[Document]:
    """
    Window ``text`` into LangChain Documents tuned for RAG.

    Each Document carries the shared metadata plus its ``chunk_index``.
    """
    base = dict(metadata or {})
    return [
        Document(page_content=window, metadata={**base, "chunk_index": idx})
        for idx, window in enumerate(window_text(text, chunk_size, chunk_overlap))
    ]


def summarize_chunks(chunks: List[Document]) -> Tuple[int, int, int]:
    """
    Return (num_chunks, min_len, max_len) for quick sanity checks.
    """
    lengths = [len(c.page_content) for c in chunks]
    if not lengths:
        return 0, 0, 0
    return len(lengths), min(lengths), max(lengths)
