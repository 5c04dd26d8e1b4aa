"""Shared fakes for the chat, ingestion and API tests.

Nothing here talks to Supabase or a model provider: the fakes record what
they were given and answer from in-memory data.
"""

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from ai_services.base import AIProvider, AIServiceInterface, StandardResponse
from ai_services.manager import AIServiceManager
from embeddings.base import EmbeddingResult
from storage.school_directory import SchoolDirectory

TENANT_ID = "tenant-1"


# =============================================================================
# Supabase
# =============================================================================


class FakeQuery:
    """Chainable stand-in for a PostgREST table query."""

    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = list(rows)
        self.columns = None

    def select(self, columns: str) -> "FakeQuery":
        self.columns = columns
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.rows = [r for r in self.rows if r.get(column) == value]
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.rows = self.rows[:count]
        return self

    def execute(self) -> SimpleNamespace:
        return SimpleNamespace(data=list(self.rows))


class FakeSupabase:
    def __init__(self, tables: Dict[str, List[Dict[str, Any]]]):
        self.tables = tables

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.get(name, []))


@pytest.fixture
def school_tables() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "profiles": [
            {"user_id": "parent-1", "tenant_id": TENANT_ID, "role": "Parent", "full_name": "Pat Parent"},
            {"user_id": "teacher-1", "tenant_id": TENANT_ID, "role": "teacher", "full_name": "Tess Teacher"},
            {"user_id": "admin-1", "tenant_id": TENANT_ID, "role": "admin", "full_name": "Ada Admin"},
        ],
        "parents": [
            {"user_id": "parent-1", "child_id": "student-1"},
        ],
        "students": [
            {"id": "student-1", "name": "Sam", "class_id": "class-5a"},
            {"id": "student-2", "name": "Alex", "class_id": "class-5a"},
            {"id": "student-3", "name": "Kim", "class_id": "class-6b"},
        ],
        "teachers": [
            {"user_id": "teacher-1", "class_id": "class-5a", "subject": "Math"},
            {"user_id": "teacher-2", "class_id": "class-5a", "subject": "Science"},
        ],
        "classes": [
            {"id": "class-5a", "grade": "5A"},
            {"id": "class-6b", "grade": "6B"},
        ],
    }


@pytest.fixture
def directory(school_tables) -> SchoolDirectory:
    return SchoolDirectory(FakeSupabase(school_tables))


# =============================================================================
# Model providers
# =============================================================================


class FakeChatService(AIServiceInterface):
    def __init__(self, provider: str, reply: str = "hello"):
        self.provider = provider
        self.reply = reply
        self.calls: List[Any] = []

    def chat_completion(self, messages, parameters) -> StandardResponse:
        self.calls.append((messages, parameters))
        return StandardResponse(
            content=self.reply,
            provider=self.provider,
            model=parameters.get("model") or "fake-model",
            processing_time=0.0,
        )


@pytest.fixture
def fake_services() -> Dict[AIProvider, FakeChatService]:
    return {p: FakeChatService(p.value, reply=f"{p.value} reply") for p in AIProvider}


@pytest.fixture
def ai_manager(fake_services) -> AIServiceManager:
    return AIServiceManager(services=fake_services)


# =============================================================================
# Embeddings and vector store
# =============================================================================


class FakeEmbedder:
    model = "fake-embedding"
    dimension = 3

    def __init__(self, fail_on_calls=()):
        self.fail_on_calls = set(fail_on_calls)
        self.calls: List[List[str]] = []
        self.queries: List[str] = []

    def embed_texts(self, texts: List[str]) -> EmbeddingResult:
        call = len(self.calls)
        self.calls.append(list(texts))
        if call in self.fail_on_calls:
            raise RuntimeError("embedding service unavailable")
        return EmbeddingResult(
            vectors=[[0.1, 0.2, 0.3] for _ in texts],
            model=self.model,
            dimension=self.dimension,
            provider="fake",
        )

    def embed_query(self, text: str) -> List[float]:
        self.queries.append(text)
        return [0.3, 0.2, 0.1]


class FakeVectorStore:
    def __init__(self, matches=None, files=None, reject_chunks=()):
        self.matches = matches or []
        self.files = files or {}
        self.reject_chunks = set(reject_chunks)
        self.documents: List[Any] = []
        self.chunks: List[Any] = []
        self.searches: List[Any] = []
        self.downloads: List[Any] = []

    def insert_document(self, document) -> str:
        self.documents.append(document)
        return f"doc-{len(self.documents)}"

    def insert_chunk(self, chunk) -> None:
        if chunk.chunk_index in self.reject_chunks:
            raise RuntimeError("insert rejected")
        self.chunks.append(chunk)

    def match_chunks(self, query_embedding, query_text, match_count):
        self.searches.append((query_embedding, query_text, match_count))
        return self.matches[:match_count]

    def download(self, bucket, path) -> bytes:
        self.downloads.append((bucket, path))
        return self.files[path]


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def vector_store() -> FakeVectorStore:
    return FakeVectorStore()
