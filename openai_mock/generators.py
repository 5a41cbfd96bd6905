"""
Mock response generators.

Builds schema-valid OpenAI responses without any inference backend:

- Chat completions carry a canned assistant reply with plausible usage.
- Embeddings are deterministic, unit-length vectors seeded from the input
  text, so the same text always maps to the same vector across runs and
  processes, while different texts map to different vectors.
- The models listing reflects the configured registry.
"""

import math
import random
import string
import time
from typing import List

from .config import ServiceConfig
from .registry import resolve_model
from .schemas import (
    ChatChoice,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    ChatUsage,
    EmbeddingData,
    EmbeddingRequest,
    EmbeddingResponse,
    EmbeddingUsage,
    ModelCard,
    ModelsResponse,
)
from .tokens import estimate_messages_tokens, estimate_tokens

EMBEDDING_DIMENSIONS = 1536  # text-embedding-ada-002 vector size
COMPLETION_TOKENS = 20
MOCK_REPLY = (
    "This is a mock response from the OpenAI API emulator. "
    "Your request has been processed successfully."
)
DEFAULT_MESSAGE = ChatMessage(role="user", content="Hello")
DEFAULT_INPUT = "Default input text"
MODEL_OWNER = "openai"
MODEL_AGE_SECONDS = 30 * 86400

ID_PREFIX = "chatcmpl-"
ID_LENGTH = 29
ID_ALPHABET = string.ascii_letters + string.digits

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def random_id(length: int = ID_LENGTH) -> str:
    """Opaque alphanumeric identifier; not suitable for anything security related."""
    return "".join(random.choices(ID_ALPHABET, k=length))


# --- CHAT ---

def generate_chat_completion(
    request: ChatCompletionRequest, config: ServiceConfig
) -> ChatCompletionResponse:
    """
    Build a chat completion for an already validated request.

    Falls back to the first configured chat model when the request named
    none, and to a single "Hello" user turn when it carried no messages.
    """
    model = resolve_model(request.model, config.chat_models)
    messages = request.messages if request.messages is not None else [DEFAULT_MESSAGE]
    prompt_tokens = estimate_messages_tokens(messages)

    return ChatCompletionResponse(
        id=ID_PREFIX + random_id(),
        created=int(time.time()),
        model=model,
        choices=[
            ChatChoice(
                index=0,
                message=ChatMessage(role="assistant", content=MOCK_REPLY),
                finish_reason="stop",
            )
        ],
        usage=ChatUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=COMPLETION_TOKENS,
            total_tokens=prompt_tokens + COMPLETION_TOKENS,
        ),
    )


# --- EMBEDDINGS ---

def embedding_seed(text: str) -> int:
    """
    Fold the text into a signed 64-bit seed: ``seed = seed * 31 + ord(c)``.

    Arithmetic wraps around like a two's-complement int64 accumulator.
    """
    seed = 0
    for char in text:
        seed = (seed * 31 + ord(char)) & _INT64_MASK
    return seed - (1 << 64) if seed & _INT64_SIGN else seed


def normalize(vector: List[float]) -> List[float]:
    """Scale to unit Euclidean length; an all-zero vector is returned as zeros."""
    magnitude = math.sqrt(sum(value * value for value in vector))
    if magnitude == 0.0:
        return [0.0] * len(vector)
    return [value / magnitude for value in vector]


def generate_embedding(text: str, dimensions: int = EMBEDDING_DIMENSIONS) -> List[float]:
    """
    Deterministic mock embedding for ``text``.

    Draws ``dimensions`` uniform values in [-1, 1) from a generator seeded by
    :func:`embedding_seed` and normalizes them. The seed is handed to
    ``random.Random`` as its unsigned 64-bit pattern because ``Random``
    discards the sign of negative integer seeds.
    """
    rng = random.Random(embedding_seed(text) & _INT64_MASK)
    raw = [rng.random() * 2 - 1 for _ in range(dimensions)]
    return normalize(raw)


def generate_embeddings(request: EmbeddingRequest, config: ServiceConfig) -> EmbeddingResponse:
    """Embed every input string, preserving input order in ``data[i].index``."""
    model = resolve_model(request.model, config.embedding_models)
    inputs = request.input if request.input is not None else [DEFAULT_INPUT]

    data = [
        EmbeddingData(embedding=generate_embedding(text), index=index)
        for index, text in enumerate(inputs)
    ]
    tokens = sum(estimate_tokens(text) for text in inputs)

    return EmbeddingResponse(
        data=data,
        model=model,
        usage=EmbeddingUsage(prompt_tokens=tokens, total_tokens=tokens),
    )


# --- MODELS ---

def list_models(config: ServiceConfig) -> ModelsResponse:
    """Chat models first, then embedding models, each in configured order."""
    created = int(time.time()) - MODEL_AGE_SECONDS
    return ModelsResponse(
        data=[
            ModelCard(id=model, created=created, owned_by=MODEL_OWNER)
            for model in (*config.chat_models, *config.embedding_models)
        ]
    )
