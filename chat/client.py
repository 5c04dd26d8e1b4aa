"""
HTTP client for the portal's chat features.

Keeps the per-session state the server does not hold (the conversation and
whether a document was ingested), routes every turn with the keyword router
and calls the matching endpoint. Errors are reported on the returned turn,
never raised.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .citations import parse_citations
from .router import ProviderChoice, route_provider

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    provider: ProviderChoice
    reply: str = ""
    citations: Dict[str, Any] = field(default_factory=dict)
    chunks: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PortalChatClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5001",
        access_token: Optional[str] = None,
        admin_token: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.access_token = access_token
        self.admin_token = admin_token
        self._owns_http = http_client is None
        self.http = http_client or httpx.Client(base_url=base_url)
        self.messages: List[Dict[str, str]] = []
        self.has_ingested_document = False

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "PortalChatClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _auth_headers(self) -> Dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def _post(self, path: str, **kwargs) -> Dict[str, Any]:
        response = self.http.post(path, **kwargs)
        try:
            data = response.json()
        except ValueError:
            return {"error": f"Unexpected response ({response.status_code})"}
        if not isinstance(data, dict):
            return {"error": f"Unexpected response ({response.status_code})"}
        if not response.is_success and "error" not in data:
            data["error"] = f"Request failed ({response.status_code})"
        return data

    def upload_document(
        self,
        tenant_id: str,
        title: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Ingest a text document. Returns ``{document_id, inserted_chunks}`` or
        ``{error}``; on success later turns may be routed to the documents.
        """
        body = {"tenantId": tenant_id, "title": title, "content": content, "metadata": metadata or {}}
        try:
            data = self._post(
                "/functions/v1/rag-ingest",
                json=body,
                headers={"x-admin-token": self.admin_token or ""},
            )
        except httpx.HTTPError as e:
            return {"error": str(e) or "Upload error"}

        if not data.get("error"):
            self.has_ingested_document = True
            logger.info(f"Document uploaded: {data.get('document_id')}, "
                        f"chunks: {data.get('inserted_chunks')}")
        return data

    def send(
        self,
        text: str,
        image: Optional[bytes] = None,
        image_name: str = "image.png",
    ) -> ChatTurn:
        """Send one user message and record the reply in the conversation."""
        history = [*self.messages, {"role": "user", "content": text}]
        self.messages = history
        turn = ChatTurn(provider=route_provider(text, self.has_ingested_document))

        try:
            if turn.provider == ProviderChoice.RAG:
                self._ask_documents(turn, text)
            elif turn.provider == ProviderChoice.DB:
                self._ask_database(turn, text)
            else:
                self._ask_chat(turn, history, image, image_name)
        except httpx.HTTPError as e:
            turn.error = str(e) or "Network error"

        if turn.reply:
            self.messages = [*history, {"role": "assistant", "content": turn.reply}]
        return turn

    def _ask_documents(self, turn: ChatTurn, text: str) -> None:
        data = self._post("/functions/v1/rag-answer", json={"query": text}, headers=self._auth_headers())
        turn.error = data.get("error")
        turn.reply = data.get("text") or ""
        turn.chunks = data.get("chunks") or []
        turn.citations = parse_citations(turn.reply, turn.chunks)

    def _ask_database(self, turn: ChatTurn, text: str) -> None:
        data = self._post("/functions/v1/db-query", json={"question": text}, headers=self._auth_headers())
        turn.error = data.get("error")
        result = data.get("result")
        if result is not None:
            turn.reply = result if isinstance(result, str) else json.dumps(result)

    def _ask_chat(
        self,
        turn: ChatTurn,
        history: List[Dict[str, str]],
        image: Optional[bytes],
        image_name: str,
    ) -> None:
        if image is not None:
            data = self._post(
                "/api/chat",
                data={"provider": turn.provider.value, "messages": json.dumps(history)},
                files={"image": (image_name, image)},
                headers=self._auth_headers(),
            )
        else:
            data = self._post(
                "/api/chat",
                json={"messages": history, "provider": turn.provider.value},
                headers=self._auth_headers(),
            )
        if data.get("reply"):
            turn.reply = data["reply"]
        else:
            turn.error = data.get("error") or "No reply from AI"
