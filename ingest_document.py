# ingest_document.py
"""
Admin script: ingest a local text or PDF file for one tenant.
Reads the file, windows it, embeds every window and stores it in Supabase.
"""

import os
import logging
from dotenv import load_dotenv
from ingest.pdf_loader import extract_text
from ingest.chunk_utils import chunk_documents, summarize_chunks
from ingest.pipeline import IngestionPipeline, IngestionRequest, IngestionError
from embeddings.registry import build_provider
from storage.supabase_storage import SupabaseVectorStore
from config import DEFAULT_CHUNK_SIZE, DEFAULT_CHUNK_OVERLAP

load_dotenv()
logging.basicConfig(level=logging.INFO)


def main():
    """Main entry point for document ingestion."""
    print("="*60)
    print("DOCUMENT INGESTION")
    print("="*60)

    path = input("\nEnter path to a text or PDF file: ").strip()
    if not os.path.exists(path):
        print(f"❌ File not found: {path}")
        return

    with open(path, "rb") as f:
        text = extract_text(f.read(), path)

    chunks = chunk_documents(text, chunk_size=DEFAULT_CHUNK_SIZE, chunk_overlap=DEFAULT_CHUNK_OVERLAP)
    num_chunks, min_len, max_len = summarize_chunks(chunks)
    print(f"Produced {num_chunks} chunks (min={min_len} chars, max={max_len} chars).")
    if not num_chunks:
        print("❌ Nothing to ingest.")
        return

    tenant_id = input("Enter tenant ID: ").strip()
    if not tenant_id:
        print("❌ Tenant ID is required.")
        return
    default_title = os.path.basename(path)
    title = input(f"Enter title [{default_title}]: ").strip() or default_title

    confirm = input(f"Store {num_chunks} chunks for tenant {tenant_id}? (y/n): ").strip().lower()
    if confirm != "y":
        print("Aborted.")
        return

    try:
        pipeline = IngestionPipeline(SupabaseVectorStore.for_service(), build_provider())
        result = pipeline.ingest(IngestionRequest(
            tenant_id=tenant_id,
            title=title,
            content=text,
            source="upload",
            source_id=default_title,
        ))
    except (IngestionError, EnvironmentError) as e:
        print(f"❌ Error: {e}")
        return

    print(f"\n✅ Document {result.document_id}: stored {result.inserted_chunks}/{num_chunks} chunks")
    for outcome in result.failed_chunks:
        print(f"   skipped chunk {outcome.chunk_index}: {outcome.error}")


if __name__ == "__main__":
    main()
