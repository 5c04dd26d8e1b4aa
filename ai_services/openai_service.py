# ai_services/openai_service.py
"""
OpenAI Service Implementation

General-purpose completion backend. Receives the full (context-enriched)
conversation, unlike the online-search and open-weights backends which only
see the latest user message.

Failures are mapped onto the AI service exception hierarchy and are never
retried; the gateway turns them into a 500 with the provider's message.
"""

import os
import time
import logging
from typing import List, Dict, Any, Optional

from openai import (
    OpenAI,
    OpenAIError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    APIConnectionError,
)

from config import DEFAULT_OPENAI_CHAT_MODEL
from .base import (
    AIServiceInterface,
    StandardResponse,
    ResponseStatus,
    AIProvider
)
from .exceptions import (
    AIRateLimitExceeded,
    AIServiceUnavailable,
    AIServiceException,
    AIAuthenticationError,
    AIInvalidResponse,
    UpstreamProviderError,
)

logger = logging.getLogger(__name__)


class OpenAIService(AIServiceInterface):
    """OpenAI chat completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = DEFAULT_OPENAI_CHAT_MODEL,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize OpenAI service.

        Args:
            api_key: OpenAI API key (defaults to env var)
            default_model: Model used when the caller does not name one
            client: Pre-built client (tests inject a fake here)
        """
        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise AIAuthenticationError("OpenAI API key not found in environment")
            client = OpenAI(api_key=api_key)

        self.client = client
        self.default_model = default_model
        self.provider = AIProvider.OPENAI.value

        logger.info(f"OpenAI service initialized: model={default_model}")

    def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        parameters: Dict[str, Any]
    ) -> StandardResponse:
        """
        Forward the whole conversation to the chat completions API.

        Args:
            messages: Ordered role-tagged messages
            parameters: Optional ``model`` and ``temperature``

        Returns:
            StandardResponse
        """
        start_time = time.time()
        model = parameters.get("model") or self.default_model

        request_args: Dict[str, Any] = {
            "model": model,
            # Only role and content are part of the wire format
            "messages": [
                {"role": m.get("role"), "content": m.get("content") or ""}
                for m in messages
            ],
        }
        if parameters.get("temperature") is not None:
            request_args["temperature"] = parameters["temperature"]

        logger.info(f"OpenAI API call: model={model}, messages={len(messages)}")

        try:
            response = self.client.chat.completions.create(**request_args)

        except RateLimitError as e:
            logger.error(f"❌ OpenAI rate limit exceeded: {e}")
            raise AIRateLimitExceeded(f"Rate limit exceeded: {e}")

        except APITimeoutError as e:
            logger.error(f"❌ OpenAI timeout: {e}")
            raise AIServiceUnavailable(f"Service timeout: {e}")

        except APIConnectionError as e:
            logger.error(f"❌ OpenAI connection error: {e}")
            raise AIServiceUnavailable(f"Connection error: {e}")

        except APIStatusError as e:
            logger.error(f"❌ OpenAI API error ({e.status_code}): {e}")
            raise UpstreamProviderError(e.message, e.status_code)

        except OpenAIError as e:
            logger.error(f"❌ OpenAI API error: {e}")
            raise AIServiceException(f"OpenAI error: {e}")

        if not response.choices or response.choices[0].message.content is None:
            raise AIInvalidResponse("No reply from OpenAI")

        content = response.choices[0].message.content

        tokens_used = {}
        if getattr(response, "usage", None) is not None:
            tokens_used = {
                "prompt": response.usage.prompt_tokens,
                "completion": response.usage.completion_tokens,
                "total": response.usage.total_tokens
            }

        processing_time = time.time() - start_time
        logger.info(f"✅ OpenAI success: tokens={tokens_used.get('total', 'n/a')}, "
                    f"time={processing_time:.2f}s")

        return StandardResponse(
            content=content,
            provider=self.provider,
            model=model,
            processing_time=processing_time,
            status=ResponseStatus.SUCCESS,
            tokens_used=tokens_used,
        )
