# ai_services/huggingface_service.py
"""Hosted open-weights completion backend (Hugging Face inference API)."""

import os
import time
import logging
from typing import Any, Dict, List, Optional

import httpx

from config import HUGGINGFACE_API_URL, HUGGINGFACE_MODEL
from .base import (
    AIServiceInterface,
    AIProvider,
    StandardResponse,
    ResponseStatus,
    latest_user_message,
)
from .exceptions import (
    AIAuthenticationError,
    AIInvalidResponse,
    AIServiceUnavailable,
    UpstreamProviderError,
)

logger = logging.getLogger(__name__)


class HuggingFaceService(AIServiceInterface):
    """Text generation through the Hugging Face inference endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = HUGGINGFACE_MODEL,
        api_url: str = HUGGINGFACE_API_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or os.getenv("HUGGINGFACE_API_KEY")
        if not self.api_key:
            raise AIAuthenticationError("Hugging Face API key not found in environment")
        self.default_model = default_model
        self.api_url = api_url.rstrip("/")
        self.http = http_client or httpx.Client()
        self.provider = AIProvider.HUGGINGFACE.value

    def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        parameters: Dict[str, Any]
    ) -> StandardResponse:
        """
        Generate from the latest user message only.

        The inference API takes a bare prompt, so history and system
        messages are not sent.
        """
        start_time = time.time()
        model = parameters.get("model") or self.default_model
        prompt = latest_user_message(messages)

        logger.info(f"Hugging Face API call: model={model}")
        try:
            response = self.http.post(
                f"{self.api_url}/{model}",
                json={"inputs": prompt},
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Hugging Face connection error: {e}")
            raise AIServiceUnavailable(f"Connection error: {e}")

        if not response.is_success:
            error = UpstreamProviderError.from_response(response, "Hugging Face API error")
            logger.error(f"❌ Hugging Face API error ({response.status_code}): {error}")
            raise error

        try:
            data = response.json()
        except ValueError:
            raise AIInvalidResponse("Hugging Face API did not return JSON.")

        content = _generated_text(data)
        if not content:
            raise AIInvalidResponse("No reply from Hugging Face")

        processing_time = time.time() - start_time
        logger.info(f"✅ Hugging Face success: time={processing_time:.2f}s")

        return StandardResponse(
            content=content,
            provider=self.provider,
            model=model,
            processing_time=processing_time,
            status=ResponseStatus.SUCCESS,
        )


def _generated_text(data: Any) -> Optional[str]:
    # Most models answer [{"generated_text": ...}], some a bare object
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("generated_text")
    if isinstance(data, dict):
        return data.get("generated_text")
    return None
