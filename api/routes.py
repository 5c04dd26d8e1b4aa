"""
HTTP routes.

- POST /api/chat                 context-enriched chat (JSON or multipart with an image)
- POST /functions/v1/pplx-chat   raw Perplexity pass-through
- POST /functions/v1/rag-ingest  document ingestion (admin token)
- POST /functions/v1/rag-answer  retrieval-augmented answer (caller's JWT)
- POST /functions/v1/db-query    NL-to-query bridge (caller's JWT)
- OPTIONS on any path            permissive CORS answer
"""

import base64
import json
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Depends, Header, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from ai_services.manager import AIServiceManager
from chat.db_bridge import answer_question
from chat.gateway import ChatGateway
from chat.rag_answer import RagAnswerPipeline
from config import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, get_allowed_origins
from ingest.pipeline import IngestionPipeline, IngestionRequest
from storage.school_directory import SchoolDirectory
from .auth import SupabaseTokenVerifier, extract_bearer_token
from .dependencies import (
    get_access_token,
    get_ai_manager,
    get_chat_gateway,
    get_ingestion_pipeline,
    get_rag_pipeline,
    get_token_verifier,
    get_user_directory,
    require_admin,
)
from .errors import InvalidRequestError
from .models import (
    ChatPayload,
    ChatResponse,
    DbQueryRequest,
    DbQueryResponse,
    ERROR_RESPONSES,
    IngestRequest,
    IngestResponse,
    RagAnswerRequest,
    RagAnswerResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def cors_headers(origin: Optional[str]) -> Dict[str, str]:
    allowed = get_allowed_origins()
    if "*" in allowed:
        allow_origin = origin or "*"
    elif origin in allowed:
        allow_origin = origin
    else:
        allow_origin = allowed[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    }


async def parse_chat_payload(request: Request) -> Tuple[ChatPayload, Optional[str]]:
    """
    Read a chat request sent either as JSON or as a form (the browser sends
    a form when an image is attached, with ``messages`` as a JSON string).

    Returns the validated payload and the image as base64, if any.
    """
    image = None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        raw = {key: form.get(key) for key in ("messages", "model", "provider")}
        upload = form.get("image")
        if isinstance(upload, UploadFile):
            image = base64.b64encode(await upload.read()).decode("ascii")
    else:
        try:
            raw = await request.json()
        except ValueError:
            raise InvalidRequestError("Request body must be valid JSON.")
        if not isinstance(raw, dict):
            raise InvalidRequestError("Request body must be a JSON object.")

    messages = raw.get("messages")
    if isinstance(messages, str):
        try:
            messages = json.loads(messages)
        except ValueError:
            raise InvalidRequestError("Messages must be an array or a valid JSON string.")
    if not isinstance(messages, list):
        raise InvalidRequestError("Messages must be an array.")

    try:
        payload = ChatPayload(
            messages=messages,
            model=raw.get("model") or None,
            provider=raw.get("provider") or None,
        )
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first.get("loc", ()))
        raise InvalidRequestError(f"Invalid {location}: {first.get('msg')}")
    return payload, image


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.options("/{full_path:path}")
def preflight(request: Request, full_path: str) -> Response:
    return Response(status_code=200, headers=cors_headers(request.headers.get("origin")))


@router.post("/api/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(
    request: Request,
    authorization: Optional[str] = Header(None),
    verifier: SupabaseTokenVerifier = Depends(get_token_verifier),
    gateway: ChatGateway = Depends(get_chat_gateway),
):
    payload, image = await parse_chat_payload(request)
    token = extract_bearer_token(authorization)
    user = await run_in_threadpool(verifier.verify, token)

    reply = await run_in_threadpool(
        gateway.handle,
        user.user_id,
        [m.model_dump() for m in payload.messages],
        payload.provider,
        payload.model,
        image,
    )
    return ChatResponse(reply=reply)


@router.post("/functions/v1/pplx-chat", responses=ERROR_RESPONSES)
def pplx_chat(
    body: Dict[str, Any] = Body(...),
    ai_manager: AIServiceManager = Depends(get_ai_manager),
):
    status_code, data = ai_manager.proxy_perplexity(body)
    return JSONResponse(content=data, status_code=status_code)


@router.post(
    "/functions/v1/rag-ingest",
    response_model=IngestResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
def rag_ingest(
    body: IngestRequest,
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
):
    result = pipeline.ingest(IngestionRequest(
        tenant_id=body.tenant_id,
        title=body.title,
        content=body.content,
        storage_path=body.storage_path,
        source=body.source,
        source_id=body.source_id,
        metadata=body.metadata,
    ))
    return IngestResponse(**result.to_dict())


@router.post(
    "/functions/v1/rag-answer",
    response_model=RagAnswerResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(get_access_token)],
)
def rag_answer(
    body: RagAnswerRequest,
    pipeline: RagAnswerPipeline = Depends(get_rag_pipeline),
):
    answer = pipeline.answer(body.query, k=body.k, temperature=body.temperature)
    return RagAnswerResponse(**answer.to_dict())


@router.post(
    "/functions/v1/db-query",
    response_model=DbQueryResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(get_access_token)],
)
def db_query(
    body: DbQueryRequest,
    directory: SchoolDirectory = Depends(get_user_directory),
):
    return DbQueryResponse(result=answer_question(directory, body.question))
