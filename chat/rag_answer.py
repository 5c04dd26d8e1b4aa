"""
Retrieval-augmented answer (read path).

query -> embedding (same model as ingestion) -> top-k chunks for the
caller's tenant -> grounding prompt with numbered chunks -> Perplexity.
The caller maps ``[n]`` markers in the answer back to chunk metadata with
``chat.citations.parse_citations``.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ai_services.base import AIProvider, StandardRequest
from ai_services.manager import AIServiceManager
from config import DEFAULT_MATCH_COUNT, DEFAULT_RAG_TEMPERATURE, PERPLEXITY_RAG_MODEL
from embeddings.base import EmbeddingsProvider
from storage.supabase_storage import SupabaseVectorStore

logger = logging.getLogger(__name__)

GROUNDING_INSTRUCTION = (
    "You are a helpful assistant. Use only the following context to answer "
    "and cite sources as [1], [2], etc.:\n"
)


def format_chunk(rank: int, chunk: Dict[str, Any]) -> str:
    return (
        f"[[Chunk {rank}]]\n{chunk.get('content', '')}\n"
        f"(Metadata: {json.dumps(chunk.get('metadata'), default=str)})"
    )


def build_grounding_prompt(chunks: List[Dict[str, Any]]) -> str:
    """System prompt listing the chunks in retrieval-rank order, numbered from 1."""
    context = "\n\n".join(format_chunk(i, c) for i, c in enumerate(chunks, 1))
    return GROUNDING_INSTRUCTION + context


@dataclass
class RagAnswer:
    text: str
    chunks: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "chunks": self.chunks}


class RagAnswerPipeline:
    """
    Args:
        vector_store: Store bound to the caller's JWT (tenant scoping via RLS)
        embedder: Must be configured like the ingestion embedder
        ai_manager: Source of the Perplexity backend
    """

    def __init__(
        self,
        vector_store: SupabaseVectorStore,
        embedder: EmbeddingsProvider,
        ai_manager: AIServiceManager,
    ):
        self.vector_store = vector_store
        self.embedder = embedder
        self.ai_manager = ai_manager

    def answer(
        self,
        query: str,
        k: int = DEFAULT_MATCH_COUNT,
        temperature: float = DEFAULT_RAG_TEMPERATURE,
    ) -> RagAnswer:
        embedding = self.embedder.embed_query(query)
        chunks = self.vector_store.match_chunks(embedding, query, k)

        request = StandardRequest(
            prompt=query,
            context=build_grounding_prompt(chunks),
            parameters={"model": PERPLEXITY_RAG_MODEL, "temperature": temperature},
            metadata={"request_type": "rag"},
        )
        response = self.ai_manager.complete(request, AIProvider.PERPLEXITY)

        logger.info(f"✅ RAG answer grounded on {len(chunks)} chunks")
        return RagAnswer(text=response.content, chunks=chunks)
