from __future__ import annotations
from typing import List
from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document
import os
import tempfile


def load_pdf(path: str) -> List[Document]:
    """
    Load a PDF into LangChain Document objects (one per page).

    Returns a list of Documents.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"PDF not found: {path}")

    loader = PyPDFLoader(path)
    docs = loader.load()
    for d in docs:
        d.metadata.setdefault("source", os.path.basename(path))
    return docs


def is_pdf(data: bytes, filename: str = "") -> bool:
    return filename.lower().endswith(".pdf") or data[:5] == b"%PDF-"


def extract_text(data: bytes, filename: str = "") -> str:
    """
    Plain text of a stored file.

    PDFs are read page by page and joined with blank lines; anything else
    is decoded as UTF-8.
    """
    if not is_pdf(data, filename):
        return data.decode("utf-8", errors="replace")

    # PyPDFLoader reads from a path
    fd, path = tempfile.mkstemp(suffix=".pdf")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        pages = load_pdf(path)
    finally:
        os.remove(path)
    return "\n\n".join(p.page_content for p in pages if p.page_content)
