import re
from typing import Any, Dict, List

CITATION_RE = re.compile(r"\[(\d+)\]")


def parse_citations(text: str, chunks: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Map each ``[n]`` marker in ``text`` to the metadata of the n-th
    retrieved chunk (1-based rank). Markers pointing outside the chunk
    list produce no entry.
    """
    citations: Dict[str, Any] = {}
    for match in CITATION_RE.finditer(text or ""):
        idx = int(match.group(1)) - 1
        if 0 <= idx < len(chunks):
            citations[match.group(0)] = chunks[idx].get("metadata")
    return citations
