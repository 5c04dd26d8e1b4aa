"""
Keyword-based provider router.

Picks the backend for a chat turn from the latest user message and whether
the session has ingested a document. Rules are evaluated in order and the
first match wins; the last rule always matches, so every message maps to
exactly one choice. The vocabulary is part of the observable behaviour:
changing a pattern changes which backend answers.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple


class ProviderChoice(str, Enum):
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"
    PERPLEXITY = "perplexity"
    RAG = "rag"
    DB = "db"


DOCUMENT_PATTERN = re.compile(r"doc|file|upload|content|paragraph|section|chapter|text|summar", re.IGNORECASE)
DATA_PATTERN = re.compile(r"table|row|column|db|database|sql|record|schema|supabase", re.IGNORECASE)
OPENAI_PATTERN = re.compile(r"openai|gpt|chatgpt", re.IGNORECASE)
HUGGINGFACE_PATTERN = re.compile(r"huggingface|mistral", re.IGNORECASE)
PERPLEXITY_PATTERN = re.compile(r"perplexity", re.IGNORECASE)


@dataclass(frozen=True)
class RoutingInput:
    message: str
    has_ingested_document: bool = False


Rule = Tuple[Callable[[RoutingInput], bool], ProviderChoice]

ROUTING_RULES: List[Rule] = [
    (lambda r: r.has_ingested_document and bool(DOCUMENT_PATTERN.search(r.message)), ProviderChoice.RAG),
    (lambda r: bool(DATA_PATTERN.search(r.message)), ProviderChoice.DB),
    (lambda r: bool(OPENAI_PATTERN.search(r.message)), ProviderChoice.OPENAI),
    (lambda r: bool(HUGGINGFACE_PATTERN.search(r.message)), ProviderChoice.HUGGINGFACE),
    (lambda r: bool(PERPLEXITY_PATTERN.search(r.message)), ProviderChoice.PERPLEXITY),
    (lambda r: r.has_ingested_document, ProviderChoice.RAG),
    (lambda r: True, ProviderChoice.PERPLEXITY),
]


def route_provider(
    message: str,
    has_ingested_document: bool = False,
    requested_provider: Optional[str] = None,
) -> ProviderChoice:
    """
    Return the backend that should handle ``message``.

    ``requested_provider`` is the provider selected in the UI. It is
    accepted but not consulted: the keyword rules always decide.
    """
    routing_input = RoutingInput(message=message or "", has_ingested_document=has_ingested_document)
    for predicate, choice in ROUTING_RULES:
        if predicate(routing_input):
            return choice
    # Unreachable: the last rule always matches
    return ProviderChoice.PERPLEXITY
