"""
Chat gateway: context enrichment and provider dispatch for one chat turn.

The provider comes from the caller. The gateway does not re-run the keyword
router; clients are expected to route before sending.
"""

import logging
from typing import Any, Dict, List, Optional

from ai_services.base import AIProvider
from ai_services.manager import AIServiceManager
from config import UNRECOGNIZED_USER_DISCLAIMER
from storage.school_directory import SchoolDirectory
from .context import resolve_user_context

logger = logging.getLogger(__name__)


class ChatGateway:
    def __init__(self, directory: SchoolDirectory, ai_manager: AIServiceManager):
        self.directory = directory
        self.ai_manager = ai_manager

    def handle(
        self,
        user_id: str,
        messages: List[Dict[str, Any]],
        provider: Optional[str] = None,
        model: Optional[str] = None,
        image: Optional[str] = None,
    ) -> str:
        """
        Answer one turn for an authenticated user.

        Known users get a synthesized system message with their role
        context prepended to the conversation. Users without a profile get
        the conversation forwarded as-is and a disclaimer appended to the
        reply.
        """
        backend = AIProvider.from_value(provider)
        context = resolve_user_context(self.directory, user_id)

        if not context.grounded:
            reply = self.ai_manager.dispatch(backend, list(messages), model=model, image=image)
            return reply + UNRECOGNIZED_USER_DISCLAIMER

        chat_messages = [context.system_message(), *messages]
        logger.info(f"Dispatching {len(chat_messages)} messages to {backend.value}")
        return self.ai_manager.dispatch(backend, chat_messages, model=model, image=image)
