"""Tests for the best-effort ingestion pipeline."""

from unittest.mock import patch

import pytest

from ingest.pipeline import (
    EmptyDocumentError,
    IngestionError,
    IngestionPipeline,
    IngestionRequest,
)
from tests.conftest import TENANT_ID, FakeEmbedder, FakeVectorStore

# 3500 characters -> 5 windows of 900 with overlap 150
FIVE_WINDOW_TEXT = "x" * 3500


def make_pipeline(store, embedder) -> IngestionPipeline:
    return IngestionPipeline(store, embedder, chunk_size=900, chunk_overlap=150, bucket="documents")


def test_ingest_stores_every_window_in_order(vector_store, embedder):
    result = make_pipeline(vector_store, embedder).ingest(IngestionRequest(
        tenant_id=TENANT_ID, title="Handbook", content=FIVE_WINDOW_TEXT, metadata={"lang": "en"},
    ))

    assert result.to_dict() == {"document_id": "doc-1", "inserted_chunks": 5}
    assert [c.chunk_index for c in vector_store.chunks] == [0, 1, 2, 3, 4]
    assert all(c.metadata == {"lang": "en"} for c in vector_store.chunks)
    assert vector_store.chunks[-1].to_dict()["tokens"] == 3500 - 4 * 750


def test_chunks_inherit_document_tenant(vector_store, embedder):
    make_pipeline(vector_store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content=FIVE_WINDOW_TEXT))

    document = vector_store.documents[0]
    assert all(c.tenant_id == document.tenant_id for c in vector_store.chunks)
    assert all(c.document_id == "doc-1" for c in vector_store.chunks)


def test_one_failed_embedding_is_skipped():
    store = FakeVectorStore()
    embedder = FakeEmbedder(fail_on_calls={2})

    result = make_pipeline(store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content=FIVE_WINDOW_TEXT))

    assert result.inserted_chunks == 4
    assert result.document_id == "doc-1"
    assert [o.chunk_index for o in result.failed_chunks] == [2]
    assert "embedding service unavailable" in result.failed_chunks[0].error
    # Not retried
    assert len(embedder.calls) == 5


def test_failed_insert_does_not_stop_later_chunks(embedder):
    store = FakeVectorStore(reject_chunks={0})

    result = make_pipeline(store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content=FIVE_WINDOW_TEXT))

    assert result.inserted_chunks == 4
    assert [c.chunk_index for c in store.chunks] == [1, 2, 3, 4]


def test_all_chunks_failing_is_an_error(vector_store):
    embedder = FakeEmbedder(fail_on_calls=range(5))

    with pytest.raises(IngestionError):
        make_pipeline(vector_store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content=FIVE_WINDOW_TEXT))


def test_empty_content_is_rejected(vector_store, embedder):
    with pytest.raises(EmptyDocumentError):
        make_pipeline(vector_store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content=""))
    assert vector_store.documents == []


def test_whitespace_content_is_one_chunk(vector_store, embedder):
    result = make_pipeline(vector_store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, content="   \n\t"))

    assert result.inserted_chunks == 1
    assert vector_store.chunks[0].content == "   \n\t"


def test_empty_stored_file_is_rejected(embedder):
    store = FakeVectorStore(files={"notes/blank.txt": b""})

    with pytest.raises(EmptyDocumentError):
        make_pipeline(store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, storage_path="notes/blank.txt"))
    assert store.documents == []


def test_storage_path_text_file_is_downloaded(embedder):
    store = FakeVectorStore(files={"notes/week1.txt": "Bring a packed lunch.".encode("utf-8")})

    result = make_pipeline(store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, storage_path="notes/week1.txt"))

    assert store.downloads == [("documents", "notes/week1.txt")]
    assert result.inserted_chunks == 1
    assert store.chunks[0].content == "Bring a packed lunch."


def test_storage_path_pdf_goes_through_pdf_loader(embedder):
    store = FakeVectorStore(files={"policies/uniform.pdf": b"%PDF-1.4 ..."})

    with patch("ingest.pipeline.extract_text", return_value="Uniform policy text") as extract:
        make_pipeline(store, embedder).ingest(IngestionRequest(tenant_id=TENANT_ID, storage_path="policies/uniform.pdf"))

    extract.assert_called_once_with(b"%PDF-1.4 ...", "policies/uniform.pdf")
    assert store.chunks[0].content == "Uniform policy text"


def test_inline_content_wins_over_storage_path(vector_store, embedder):
    make_pipeline(vector_store, embedder).ingest(IngestionRequest(
        tenant_id=TENANT_ID, content="inline", storage_path="ignored.txt",
    ))
    assert vector_store.downloads == []
