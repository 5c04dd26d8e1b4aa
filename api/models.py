"""
Pydantic models for request/response validation.

Field names follow the wire format the portal front-end already sends
(camelCase on the ingestion endpoint).
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config import DEFAULT_MATCH_COUNT, DEFAULT_RAG_TEMPERATURE


class ChatMessage(BaseModel):
    """One conversation entry; order in the list is significant."""
    model_config = ConfigDict(extra="ignore")

    role: Literal["system", "user", "assistant"]
    content: Optional[str] = ""

    @field_validator("content", mode="after")
    @classmethod
    def null_content_is_empty(cls, value: Optional[str]) -> str:
        return value or ""


class ChatPayload(BaseModel):
    messages: List[ChatMessage]
    model: Optional[str] = None
    provider: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


class IngestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: Optional[str] = Field(None, alias="tenantId")
    title: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = Field(None, alias="sourceId")
    content: Optional[str] = None
    storage_path: Optional[str] = Field(None, alias="storagePath")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_tenant_and_content(self) -> "IngestRequest":
        if not self.tenant_id or not (self.content or self.storage_path):
            raise ValueError("Missing tenantId or content/storagePath")
        return self


class IngestResponse(BaseModel):
    document_id: Any
    inserted_chunks: int


class RagAnswerRequest(BaseModel):
    query: str = Field(..., min_length=1)
    k: int = Field(DEFAULT_MATCH_COUNT, ge=1)
    temperature: float = DEFAULT_RAG_TEMPERATURE


class RagAnswerResponse(BaseModel):
    text: str
    chunks: List[Dict[str, Any]]


class DbQueryRequest(BaseModel):
    question: str = Field(..., min_length=1)


class DbQueryResponse(BaseModel):
    result: Any = None


class ErrorResponse(BaseModel):
    error: str


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed request"},
    401: {"model": ErrorResponse, "description": "Missing or rejected credentials"},
    500: {"model": ErrorResponse, "description": "Upstream or internal failure"},
}
