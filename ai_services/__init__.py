"""AI Services Module - completion backends and provider dispatch."""

from .base import (
    AIProvider,
    ResponseStatus,
    StandardRequest,
    StandardResponse,
    AIServiceInterface,
    latest_user_message,
)
from .exceptions import (
    AIServiceException,
    AIServiceUnavailable,
    AIRateLimitExceeded,
    AIInvalidResponse,
    AIAuthenticationError,
    UpstreamProviderError,
)
from .openai_service import OpenAIService
from .perplexity_service import PerplexityService
from .huggingface_service import HuggingFaceService
from .manager import AIServiceManager, get_ai_service

__all__ = [
    'AIProvider',
    'ResponseStatus',
    'StandardRequest',
    'StandardResponse',
    'AIServiceInterface',
    'latest_user_message',
    'AIServiceException',
    'AIServiceUnavailable',
    'AIRateLimitExceeded',
    'AIInvalidResponse',
    'AIAuthenticationError',
    'UpstreamProviderError',
    'OpenAIService',
    'PerplexityService',
    'HuggingFaceService',
    'AIServiceManager',
    'get_ai_service',
]
