"""Base classes and interfaces for AI services."""

from abc import ABC, abstractmethod
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from datetime import datetime


class AIProvider(Enum):
    """Completion backends the chat gateway can dispatch to."""
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"
    PERPLEXITY = "perplexity"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "AIProvider":
        """
        Resolve a caller-supplied provider name.

        Unknown or missing names fall back to OpenAI, the general-purpose
        backend that receives the full conversation.
        """
        if value:
            for provider in cls:
                if provider.value == value.strip().lower():
                    return provider
        return cls.OPENAI


class ResponseStatus(Enum):
    """Response status indicators."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class StandardRequest:
    """Single-turn request: an optional system context plus one user prompt."""
    prompt: str
    context: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=lambda: {
        "temperature": 0.2,
    })
    metadata: Dict[str, Any] = field(default_factory=lambda: {
        "tenant_id": None,
        "user_id": None,
        "request_type": "general"
    })


@dataclass
class StandardResponse:
    """Standardized response format across all AI providers."""
    content: str
    provider: str
    model: str
    processing_time: float
    status: ResponseStatus = ResponseStatus.SUCCESS
    tokens_used: Dict[str, int] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AIServiceInterface(ABC):
    """Abstract base class for all AI service implementations."""

    provider: str

    @abstractmethod
    def chat_completion(self, messages: List[Dict[str, Any]],
                        parameters: Dict[str, Any]) -> StandardResponse:
        """Generate a completion for an ordered list of role-tagged messages."""

    def generate_text(self, request: StandardRequest) -> StandardResponse:
        """Generate a completion for a single prompt with optional system context."""
        return self.chat_completion(build_messages(request), dict(request.parameters))


def build_messages(request: StandardRequest) -> List[Dict[str, str]]:
    """Build messages array from request."""
    messages = []

    if request.context:
        messages.append({
            "role": "system",
            "content": request.context
        })

    messages.append({
        "role": "user",
        "content": request.prompt
    })

    return messages


def latest_user_message(messages: List[Dict[str, Any]]) -> str:
    """Content of the most recent user message, or an empty string."""
    for message in reversed(messages):
        if message.get("role") == "user":
            return message.get("content") or ""
    return ""
