"""
Supabase vector storage for tenant-scoped document chunks.

Tables (created outside this repository, with pgvector and RLS):
- ``documents``:  one row per ingestion call
- ``doc_chunks``: one row per window, with its embedding
- ``match_chunks_secure``: RPC doing the similarity search; it runs with the
  caller's JWT so row-level security restricts matches to the caller's tenant
"""

from __future__ import annotations

import os
import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, asdict, field

from supabase import create_client, Client
from supabase.client import ClientOptions

from config import MATCH_CHUNKS_RPC

logger = logging.getLogger(__name__)


@dataclass
class DocumentRecord:
    """Row inserted into ``documents``."""
    tenant_id: str
    title: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChunkRecord:
    """Row inserted into ``doc_chunks``; ``tenant_id`` always mirrors its document."""
    tenant_id: str
    document_id: Any
    chunk_index: int
    content: str
    embedding: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def tokens(self) -> int:
        # Character count; no tokenizer is involved
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record["tokens"] = self.tokens
        return record


def service_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """
    Supabase client with the service-role key (bypasses RLS).

    Raises:
        EnvironmentError: If credentials are not provided
    """
    url = url or os.getenv("SUPABASE_URL")
    key = key or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise EnvironmentError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment or passed as arguments.\n"
            "Add them to your .env file or export as environment variables."
        )
    return create_client(url, key)


def user_client(access_token: str, url: Optional[str] = None, anon_key: Optional[str] = None) -> Client:
    """
    Supabase client acting as the caller: anon key plus the caller's JWT,
    so every query is filtered by row-level security.
    """
    url = url or os.getenv("SUPABASE_URL")
    anon_key = anon_key or os.getenv("SUPABASE_ANON_KEY")
    if not url or not anon_key:
        raise EnvironmentError(
            "SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment or passed as arguments."
        )
    options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    return create_client(url, anon_key, options=options)


class SupabaseVectorStore:
    """
    Documents, chunks and similarity search in Supabase (pgvector).

    Features:
    - Document + per-chunk inserts (one row at a time, so one bad chunk
      never rejects its siblings)
    - Tenant-restricted similarity search through an RLS-aware RPC
    - Raw file download from Supabase Storage
    """

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def for_service(cls) -> "SupabaseVectorStore":
        return cls(service_client())

    @classmethod
    def for_user(cls, access_token: str) -> "SupabaseVectorStore":
        return cls(user_client(access_token))

    def insert_document(self, document: DocumentRecord) -> Any:
        """
        Insert one ``documents`` row and return its generated id.
        """
        response = self.client.table("documents").insert(document.to_dict()).execute()
        if not response.data:
            raise RuntimeError(f"Failed to insert document: {response}")
        document_id = response.data[0]["id"]
        logger.info(f"✅ Document {document_id} created for tenant {document.tenant_id}")
        return document_id

    def insert_chunk(self, chunk: ChunkRecord) -> None:
        """Insert one ``doc_chunks`` row; errors propagate to the caller."""
        self.client.table("doc_chunks").insert(chunk.to_dict()).execute()

    def match_chunks(
        self,
        query_embedding: List[float],
        query_text: str,
        match_count: int,
    ) -> List[Dict[str, Any]]:
        """
        Top ``match_count`` chunks by similarity, best first.

        Tenant restriction is enforced by the RPC under the caller's JWT.
        """
        logger.info(f"🔍 Searching {MATCH_CHUNKS_RPC} with limit={match_count}")
        response = self.client.rpc(
            MATCH_CHUNKS_RPC,
            {
                "query_embedding": query_embedding,
                "query_text": query_text,
                "match_count": match_count,
            }
        ).execute()
        results = response.data or []
        logger.info(f"✅ Found {len(results)} matching chunks")
        return results

    def download(self, bucket: str, path: str) -> bytes:
        """Raw bytes of a file in Supabase Storage."""
        logger.info(f"Downloading {bucket}/{path}")
        return self.client.storage.from_(bucket).download(path)
