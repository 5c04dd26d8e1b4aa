# ai_services/perplexity_service.py
"""
Perplexity (online-search) completion backend.

Used three ways:
- chat turns routed to ``perplexity`` (only the latest user message is sent),
- the grounded RAG answer (system grounding prompt + question),
- the ``pplx-chat`` pass-through endpoint (body and upstream status verbatim).
"""

import time
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from config import PERPLEXITY_API_URL, PERPLEXITY_CHAT_MODEL, get_perplexity_api_key
from .base import AIServiceInterface, AIProvider, StandardResponse, ResponseStatus
from .exceptions import (
    AIAuthenticationError,
    AIInvalidResponse,
    AIServiceUnavailable,
    UpstreamProviderError,
)

logger = logging.getLogger(__name__)


class PerplexityService(AIServiceInterface):
    """Perplexity chat completions over plain HTTP."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = PERPLEXITY_CHAT_MODEL,
        api_url: str = PERPLEXITY_API_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or get_perplexity_api_key()
        if not self.api_key:
            raise AIAuthenticationError(
                "Perplexity API key is missing. Please set PERPLEXITY_API_KEY in your .env file."
            )
        self.default_model = default_model
        self.api_url = api_url
        self.http = http_client or httpx.Client()
        self.provider = AIProvider.PERPLEXITY.value

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, body: Dict[str, Any]) -> httpx.Response:
        try:
            return self.http.post(self.api_url, json=body, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"❌ Perplexity timeout: {e}")
            raise AIServiceUnavailable(f"Service timeout: {e}")
        except httpx.HTTPError as e:
            logger.error(f"❌ Perplexity connection error: {e}")
            raise AIServiceUnavailable(f"Connection error: {e}")

    def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        parameters: Dict[str, Any]
    ) -> StandardResponse:
        """
        Send ``messages`` as given.

        Recognised parameters: ``model``, ``temperature`` and ``image``
        (base64 payload attached to the request body).
        """
        start_time = time.time()
        model = parameters.get("model") or self.default_model

        body: Dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": m.get("role"), "content": m.get("content") or ""}
                for m in messages
            ],
        }
        if parameters.get("temperature") is not None:
            body["temperature"] = parameters["temperature"]
        if parameters.get("image"):
            body["image"] = parameters["image"]

        logger.info(f"Perplexity API call: model={model}, messages={len(messages)}")
        response = self._post(body)

        if not response.is_success:
            error = UpstreamProviderError.from_response(response, "Perplexity API error")
            logger.error(f"❌ Perplexity API error ({response.status_code}): {error}")
            raise error

        if "application/json" not in response.headers.get("content-type", ""):
            raise AIInvalidResponse("Perplexity API did not return JSON.")

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise AIInvalidResponse("No reply from Perplexity")

        processing_time = time.time() - start_time
        logger.info(f"✅ Perplexity success: time={processing_time:.2f}s")

        return StandardResponse(
            content=content,
            provider=self.provider,
            model=model,
            processing_time=processing_time,
            status=ResponseStatus.SUCCESS,
            tokens_used=_usage(data),
        )

    def proxy(self, body: Dict[str, Any]) -> Tuple[int, Any]:
        """
        Forward a raw request body and return ``(status_code, json_body)``
        exactly as the upstream answered.
        """
        response = self._post(body)
        try:
            payload = response.json()
        except ValueError:
            raise AIInvalidResponse("Perplexity API did not return JSON.")
        logger.info(f"Perplexity pass-through answered {response.status_code}")
        return response.status_code, payload


def _usage(data: Dict[str, Any]) -> Dict[str, int]:
    usage = data.get("usage") or {}
    if not isinstance(usage, dict):
        return {}
    return {
        "prompt": usage.get("prompt_tokens", 0),
        "completion": usage.get("completion_tokens", 0),
        "total": usage.get("total_tokens", 0),
    }
