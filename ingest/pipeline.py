"""
Ingestion pipeline (write path).

content -> fixed windows -> one ``documents`` row -> for each window, in
order: embed + insert one ``doc_chunks`` row.

Chunks are best-effort: every window gets an outcome, a failed embedding or
insert is recorded and skipped (never retried) and the loop moves on.
Only a document whose every chunk failed is reported as an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import DEFAULT_CHUNK_SIZE, DEFAULT_CHUNK_OVERLAP, get_storage_bucket
from embeddings.base import EmbeddingsProvider
from storage.supabase_storage import SupabaseVectorStore, DocumentRecord, ChunkRecord
from .chunk_utils import window_text
from .pdf_loader import extract_text

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when a document could not be ingested at all."""


class EmptyDocumentError(IngestionError):
    """Raised when there is no text to ingest."""


@dataclass
class IngestionRequest:
    tenant_id: str
    title: Optional[str] = None
    content: Optional[str] = None
    storage_path: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ChunkOutcome:
    chunk_index: int
    inserted: bool
    error: Optional[str] = None


@dataclass
class IngestionResult:
    document_id: Any
    outcomes: List[ChunkOutcome] = field(default_factory=list)

    @property
    def inserted_chunks(self) -> int:
        return sum(1 for o in self.outcomes if o.inserted)

    @property
    def failed_chunks(self) -> List[ChunkOutcome]:
        return [o for o in self.outcomes if not o.inserted]

    def to_dict(self) -> Dict[str, Any]:
        return {"document_id": self.document_id, "inserted_chunks": self.inserted_chunks}


class IngestionPipeline:
    """
    Args:
        vector_store: Store writing with the service-role client
        embedder: Embedding provider; must match the one used for queries
        chunk_size / chunk_overlap: Window geometry
        bucket: Storage bucket holding files referenced by ``storage_path``
    """

    def __init__(
        self,
        vector_store: SupabaseVectorStore,
        embedder: EmbeddingsProvider,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        bucket: Optional[str] = None,
    ):
        self.vector_store = vector_store
        self.embedder = embedder
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.bucket = bucket or get_storage_bucket()

    def resolve_content(self, request: IngestionRequest) -> str:
        if request.content:
            return request.content
        if request.storage_path:
            data = self.vector_store.download(self.bucket, request.storage_path)
            return extract_text(data, request.storage_path)
        return ""

    def ingest(self, request: IngestionRequest) -> IngestionResult:
        content = self.resolve_content(request)
        if not content:
            raise EmptyDocumentError("Document has no text content")

        windows = window_text(content, self.chunk_size, self.chunk_overlap)
        logger.info(f"📄 Ingesting '{request.title}' for tenant {request.tenant_id}: "
                    f"{len(content)} chars, {len(windows)} chunks")

        document_id = self.vector_store.insert_document(DocumentRecord(
            tenant_id=request.tenant_id,
            title=request.title,
            source=request.source,
            source_id=request.source_id,
            metadata=request.metadata,
        ))

        result = IngestionResult(document_id=document_id)
        for idx, window in enumerate(windows):
            result.outcomes.append(self._ingest_chunk(request, document_id, idx, window))

        failed = result.failed_chunks
        if failed:
            logger.warning(f"⚠️  {len(failed)}/{len(windows)} chunks skipped for document {document_id}")
        if windows and result.inserted_chunks == 0:
            raise IngestionError(f"No chunks were ingested for document {document_id}")

        logger.info(f"✅ Document {document_id}: {result.inserted_chunks}/{len(windows)} chunks stored")
        return result

    def _ingest_chunk(
        self,
        request: IngestionRequest,
        document_id: Any,
        idx: int,
        window: str,
    ) -> ChunkOutcome:
        try:
            embedding = self.embedder.embed_texts([window]).vectors[0]
            self.vector_store.insert_chunk(ChunkRecord(
                tenant_id=request.tenant_id,
                document_id=document_id,
                chunk_index=idx,
                content=window,
                embedding=embedding,
                metadata=request.metadata,
            ))
        except Exception as e:
            logger.warning(f"Chunk {idx} of document {document_id} skipped: {e}")
            return ChunkOutcome(chunk_index=idx, inserted=False, error=str(e))
        return ChunkOutcome(chunk_index=idx, inserted=True)
