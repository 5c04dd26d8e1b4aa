"""
Document ingestion package: windowing, text extraction and the pipeline.
"""

from .chunk_utils import window_text, chunk_documents, summarize_chunks
from .pdf_loader import load_pdf, extract_text
from .pipeline import (
    IngestionPipeline,
    IngestionRequest,
    IngestionResult,
    ChunkOutcome,
    IngestionError,
    EmptyDocumentError,
)

__all__ = [
    'window_text',
    'chunk_documents',
    'summarize_chunks',
    'load_pdf',
    'extract_text',
    'IngestionPipeline',
    'IngestionRequest',
    'IngestionResult',
    'ChunkOutcome',
    'IngestionError',
    'EmptyDocumentError',
]
