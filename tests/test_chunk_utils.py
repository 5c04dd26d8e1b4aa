"""Tests for fixed-window chunking."""

import math

import pytest

from ingest.chunk_utils import chunk_documents, summarize_chunks, window_text

SIZE = 900
OVERLAP = 150
STRIDE = SIZE - OVERLAP


def make_text(length: int) -> str:
    return "".join(chr(ord("a") + i % 26) for i in range(length))


def test_empty_text_has_no_windows():
    assert window_text("") == []


def test_short_text_is_one_window():
    assert window_text("hello") == ["hello"]


@pytest.mark.parametrize("length", [1, 150, 151, 899, 900, 901, 1000, 2400, 3100, 3500, 10000])
def test_window_count(length):
    windows = window_text(make_text(length), SIZE, OVERLAP)
    assert len(windows) == max(1, math.ceil((length - OVERLAP) / STRIDE))


@pytest.mark.parametrize("length", [1, 900, 1000, 2400, 3100, 10001])
def test_windows_cover_text_without_gaps(length):
    text = make_text(length)
    windows = window_text(text, SIZE, OVERLAP)

    for i, window in enumerate(windows):
        start = i * STRIDE
        assert window == text[start:start + SIZE]
    last_start = (len(windows) - 1) * STRIDE
    assert last_start + len(windows[-1]) == length


def test_all_windows_but_last_are_full_size():
    windows = window_text(make_text(3100), SIZE, OVERLAP)
    assert [len(w) for w in windows[:-1]] == [SIZE] * (len(windows) - 1)
    assert len(windows[-1]) == 3100 - 3 * STRIDE


@pytest.mark.parametrize("size, overlap", [(0, 0), (100, 100), (100, -1), (100, 150)])
def test_invalid_geometry_is_rejected(size, overlap):
    with pytest.raises(ValueError):
        window_text("abc", size, overlap)


def test_chunk_documents_carries_metadata_and_index():
    docs = chunk_documents(make_text(1000), {"source": "handbook.pdf"})
    assert [d.metadata["chunk_index"] for d in docs] == [0, 1]
    assert all(d.metadata["source"] == "handbook.pdf" for d in docs)


def test_summarize_chunks():
    docs = chunk_documents(make_text(1000))
    assert summarize_chunks(docs) == (2, 250, 900)
    assert summarize_chunks([]) == (0, 0, 0)
