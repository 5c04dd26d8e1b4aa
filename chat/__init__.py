"""
Chat features: provider routing, context-enriched chat, retrieval-augmented
answers with citations and the NL-to-query bridge.
"""

from .router import ProviderChoice, route_provider
from .citations import parse_citations
from .context import UserContext, resolve_user_context
from .gateway import ChatGateway
from .rag_answer import RagAnswer, RagAnswerPipeline, build_grounding_prompt
from .db_bridge import answer_question, REFUSAL
from .client import PortalChatClient, ChatTurn

__all__ = [
    'ProviderChoice',
    'route_provider',
    'parse_citations',
    'UserContext',
    'resolve_user_context',
    'ChatGateway',
    'RagAnswer',
    'RagAnswerPipeline',
    'build_grounding_prompt',
    'answer_question',
    'REFUSAL',
    'PortalChatClient',
    'ChatTurn',
]
