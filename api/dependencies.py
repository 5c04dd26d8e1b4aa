"""
Dependency wiring for the routes.

Long-lived collaborators (service-role Supabase client, embedder, token
verifier) are built once per process; anything bound to the caller's JWT is
built per request. Tests replace these through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from supabase import Client

from ai_services.manager import AIServiceManager, get_ai_service
from chat.gateway import ChatGateway
from chat.rag_answer import RagAnswerPipeline
from embeddings.base import EmbeddingsProvider
from embeddings.registry import build_provider
from ingest.pipeline import IngestionPipeline
from storage.school_directory import SchoolDirectory
from storage.supabase_storage import SupabaseVectorStore, service_client, user_client
from .auth import SupabaseTokenVerifier, require_authorization, verify_admin_token


@lru_cache
def get_service_client() -> Client:
    return service_client()


@lru_cache
def get_embedder() -> EmbeddingsProvider:
    return build_provider()


@lru_cache
def get_token_verifier() -> SupabaseTokenVerifier:
    return SupabaseTokenVerifier(get_service_client())


def get_ai_manager() -> AIServiceManager:
    return get_ai_service()


def get_chat_gateway() -> ChatGateway:
    return ChatGateway(SchoolDirectory(get_service_client()), get_ai_manager())


def get_access_token(authorization: Optional[str] = Header(None)) -> str:
    return require_authorization(authorization)


def require_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    verify_admin_token(x_admin_token)


def get_ingestion_pipeline() -> IngestionPipeline:
    return IngestionPipeline(SupabaseVectorStore(get_service_client()), get_embedder())


def get_rag_pipeline(access_token: str = Depends(get_access_token)) -> RagAnswerPipeline:
    return RagAnswerPipeline(
        SupabaseVectorStore.for_user(access_token),
        get_embedder(),
        get_ai_manager(),
    )


def get_user_directory(access_token: str = Depends(get_access_token)) -> SchoolDirectory:
    return SchoolDirectory(user_client(access_token))
