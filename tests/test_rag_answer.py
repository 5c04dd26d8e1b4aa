"""Tests for the retrieval-augmented answer pipeline."""

from ai_services.base import AIProvider
from chat.rag_answer import GROUNDING_INSTRUCTION, RagAnswerPipeline, build_grounding_prompt
from config import PERPLEXITY_RAG_MODEL
from tests.conftest import FakeVectorStore

MATCHES = [
    {"content": "Lunch is served at noon.", "metadata": {"title": "Schedule"}, "similarity": 0.91},
    {"content": "Buses leave at 3pm.", "metadata": {"title": "Transport"}, "similarity": 0.85},
    {"content": "Library opens at 8am.", "metadata": {"title": "Library"}, "similarity": 0.40},
]


def test_grounding_prompt_numbers_chunks_in_rank_order():
    prompt = build_grounding_prompt(MATCHES[:2])

    assert prompt.startswith(GROUNDING_INSTRUCTION)
    assert prompt[len(GROUNDING_INSTRUCTION):] == (
        '[[Chunk 1]]\nLunch is served at noon.\n(Metadata: {"title": "Schedule"})'
        "\n\n"
        '[[Chunk 2]]\nBuses leave at 3pm.\n(Metadata: {"title": "Transport"})'
    )


def test_grounding_prompt_without_chunks():
    assert build_grounding_prompt([]) == GROUNDING_INSTRUCTION


def test_answer_retrieves_and_asks_perplexity(embedder, ai_manager, fake_services):
    store = FakeVectorStore(matches=MATCHES)
    pipeline = RagAnswerPipeline(store, embedder, ai_manager)

    answer = pipeline.answer("When is lunch?", k=2, temperature=0.5)

    assert embedder.queries == ["When is lunch?"]
    assert store.searches == [([0.3, 0.2, 0.1], "When is lunch?", 2)]
    assert answer.to_dict() == {"text": "perplexity reply", "chunks": MATCHES[:2]}

    messages, parameters = fake_services[AIProvider.PERPLEXITY].calls[0]
    assert messages[0] == {"role": "system", "content": build_grounding_prompt(MATCHES[:2])}
    assert messages[1] == {"role": "user", "content": "When is lunch?"}
    assert parameters == {"model": PERPLEXITY_RAG_MODEL, "temperature": 0.5}


def test_answer_defaults(embedder, ai_manager, fake_services):
    store = FakeVectorStore(matches=MATCHES)
    RagAnswerPipeline(store, embedder, ai_manager).answer("Library hours?")

    assert store.searches[0][2] == 6
    _, parameters = fake_services[AIProvider.PERPLEXITY].calls[0]
    assert parameters["temperature"] == 0.2
