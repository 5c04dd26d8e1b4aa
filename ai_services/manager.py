# ai_services/manager.py
"""
AI Service Manager - Centralized AI Provider Management

Holds one service per backend and applies the per-provider forwarding
policy used by the chat gateway:

- perplexity:  only the latest user message (plus an optional image)
- huggingface: only the latest user message
- openai:      the full conversation (also the fallback for unknown names)

Services are built on first use, so a backend whose API key is missing only
fails the requests that actually need it. There is no fallback between
providers and no retry: the first failure propagates to the caller.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base import (
    AIServiceInterface,
    AIProvider,
    StandardRequest,
    StandardResponse,
    latest_user_message,
)
from .openai_service import OpenAIService
from .perplexity_service import PerplexityService
from .huggingface_service import HuggingFaceService

logger = logging.getLogger(__name__)


DEFAULT_FACTORIES: Dict[AIProvider, Callable[[], AIServiceInterface]] = {
    AIProvider.OPENAI: OpenAIService,
    AIProvider.PERPLEXITY: PerplexityService,
    AIProvider.HUGGINGFACE: HuggingFaceService,
}


class AIServiceManager:
    """
    Centralized manager for AI services.

    Args:
        services: Pre-built services keyed by provider (tests pass fakes here)
        factories: Constructors for providers not in ``services``
    """

    def __init__(
        self,
        services: Optional[Dict[AIProvider, AIServiceInterface]] = None,
        factories: Optional[Dict[AIProvider, Callable[[], AIServiceInterface]]] = None,
    ):
        self.services: Dict[AIProvider, AIServiceInterface] = dict(services or {})
        self.factories = dict(DEFAULT_FACTORIES)
        if factories:
            self.factories.update(factories)

    def get_service(self, provider: AIProvider) -> AIServiceInterface:
        """Return the service for ``provider``, building it on first use."""
        if provider not in self.services:
            self.services[provider] = self.factories[provider]()
            logger.info(f"✅ {provider.value} service initialized")
        return self.services[provider]

    def dispatch(
        self,
        provider: AIProvider,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        image: Optional[str] = None,
    ) -> str:
        """
        Send a chat turn to ``provider`` and return the reply text.

        Args:
            provider: Backend chosen by the caller
            messages: Full conversation, system context included
            model: Model override (only honoured by OpenAI)
            image: Base64 image payload (only forwarded to Perplexity)
        """
        service = self.get_service(provider)

        if provider == AIProvider.PERPLEXITY:
            turn = [{"role": "user", "content": latest_user_message(messages)}]
            response = service.chat_completion(turn, {"image": image})
        elif provider == AIProvider.HUGGINGFACE:
            turn = [{"role": "user", "content": latest_user_message(messages)}]
            response = service.chat_completion(turn, {})
        else:
            response = service.chat_completion(messages, {"model": model})

        logger.info(f"Chat turn answered by {response.provider} ({response.model})")
        return response.content

    def complete(
        self,
        request: StandardRequest,
        provider: AIProvider = AIProvider.PERPLEXITY,
    ) -> StandardResponse:
        """Single-prompt completion (used by the grounded RAG answer)."""
        return self.get_service(provider).generate_text(request)

    def proxy_perplexity(self, body: Dict[str, Any]) -> Tuple[int, Any]:
        """Raw Perplexity pass-through: ``(status_code, json_body)``."""
        return self.get_service(AIProvider.PERPLEXITY).proxy(body)

    def __repr__(self) -> str:
        """String representation."""
        return f"AIServiceManager(initialized={[p.value for p in self.services.keys()]})"


# ============================================================================
# GLOBAL INSTANCE
# ============================================================================

_service_manager: Optional[AIServiceManager] = None


def get_ai_service() -> AIServiceManager:
    """
    Get or create global AI service manager.

    Returns:
        Global AIServiceManager instance
    """
    global _service_manager
    if _service_manager is None:
        _service_manager = AIServiceManager()
    return _service_manager
