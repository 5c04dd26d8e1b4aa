import os
from typing import List

# Embedding provider + model defaults
DEFAULT_EMBED_PROVIDER = "openai"
DEFAULT_EMBED_MODEL = "text-embedding-3-small"

# Define a dimensions override here (None = use model default).
# Ingestion and retrieval must share the same model and dimensions.
DEFAULT_EMBED_DIMENSIONS = None

# Default chunking parameters
DEFAULT_CHUNK_SIZE = 900
DEFAULT_CHUNK_OVERLAP = 150

# Retrieval defaults
DEFAULT_MATCH_COUNT = 6
DEFAULT_RAG_TEMPERATURE = 0.2
MATCH_CHUNKS_RPC = "match_chunks_secure"

# Chat backends
DEFAULT_OPENAI_CHAT_MODEL = "gpt-3.5-turbo"
PERPLEXITY_API_URL = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_CHAT_MODEL = "sonar-pro"
PERPLEXITY_RAG_MODEL = "sonar-small-chat"
HUGGINGFACE_API_URL = "https://api-inference.huggingface.co/models"
HUGGINGFACE_MODEL = "mistralai/Mistral-7B-Instruct-v0.2"

# Upstream error bodies are cut to this many characters
ERROR_BODY_LIMIT = 200

UNRECOGNIZED_USER_DISCLAIMER = (
    "\n\n[Disclaimer: You were not found in backend. "
    "Please talk to admin to get full access.]"
)

DEFAULT_PORT = 5001
DEFAULT_STORAGE_BUCKET = "documents"

CORS_ALLOW_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-admin-token",
]
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]


def get_allowed_origins() -> List[str]:
    """Origins allowed by CORS, from the comma separated ALLOWED_ORIGINS."""
    raw = os.getenv("ALLOWED_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def get_perplexity_api_key() -> str | None:
    # The edge functions and the chat server historically used different names
    return os.getenv("PERPLEXITY_API_KEY") or os.getenv("PPLX_API_KEY")


def get_storage_bucket() -> str:
    return os.getenv("RAG_STORAGE_BUCKET", DEFAULT_STORAGE_BUCKET)


def get_port() -> int:
    return int(os.getenv("PORT", DEFAULT_PORT))
