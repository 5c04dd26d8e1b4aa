"""Tests for the Supabase storage layer with a mocked client."""

from unittest.mock import MagicMock, patch

import pytest

from storage.supabase_storage import (
    ChunkRecord,
    DocumentRecord,
    SupabaseVectorStore,
    service_client,
    user_client,
)


@pytest.fixture
def supabase():
    return MagicMock()


def test_insert_document_returns_generated_id(supabase):
    supabase.table.return_value.insert.return_value.execute.return_value.data = [{"id": 42}]
    store = SupabaseVectorStore(supabase)

    document_id = store.insert_document(DocumentRecord(tenant_id="t1", title="Handbook", metadata={"a": 1}))

    assert document_id == 42
    supabase.table.assert_called_with("documents")
    supabase.table.return_value.insert.assert_called_once_with({
        "tenant_id": "t1", "title": "Handbook", "source": None, "source_id": None, "metadata": {"a": 1},
    })


def test_insert_document_without_data_raises(supabase):
    supabase.table.return_value.insert.return_value.execute.return_value.data = []
    with pytest.raises(RuntimeError):
        SupabaseVectorStore(supabase).insert_document(DocumentRecord(tenant_id="t1"))


def test_chunk_row_includes_character_count(supabase):
    chunk = ChunkRecord(tenant_id="t1", document_id=42, chunk_index=0, content="abcdef", embedding=[0.1])

    SupabaseVectorStore(supabase).insert_chunk(chunk)

    supabase.table.assert_called_with("doc_chunks")
    row = supabase.table.return_value.insert.call_args.args[0]
    assert row["tokens"] == 6
    assert row["tenant_id"] == "t1"
    assert row["chunk_index"] == 0


def test_match_chunks_calls_secure_rpc(supabase):
    supabase.rpc.return_value.execute.return_value.data = [{"content": "c", "metadata": {}}]

    results = SupabaseVectorStore(supabase).match_chunks([0.1, 0.2], "question", 3)

    assert results == [{"content": "c", "metadata": {}}]
    supabase.rpc.assert_called_once_with(
        "match_chunks_secure",
        {"query_embedding": [0.1, 0.2], "query_text": "question", "match_count": 3},
    )


def test_download_reads_from_bucket(supabase):
    supabase.storage.from_.return_value.download.return_value = b"data"

    assert SupabaseVectorStore(supabase).download("documents", "a/b.txt") == b"data"
    supabase.storage.from_.assert_called_once_with("documents")


def test_service_client_requires_credentials(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    with pytest.raises(EnvironmentError):
        service_client()


def test_user_client_forwards_caller_token(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    with patch("storage.supabase_storage.create_client") as create:
        user_client("caller-jwt")

    url, key = create.call_args.args
    assert (url, key) == ("https://project.supabase.co", "anon")
    assert create.call_args.kwargs["options"].headers["Authorization"] == "Bearer caller-jwt"
