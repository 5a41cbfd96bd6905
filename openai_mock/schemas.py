"""
Request and response models for the OpenAI-compatible endpoints.

Request models are deliberately lenient: a field of the wrong type is reset to
its default instead of failing validation, so a sloppy client still gets a
well-formed mock response. Response models mirror the OpenAI wire format
(snake_case keys, fixed ``object`` discriminators).
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, field_validator


def _string_or_empty(value: Any) -> str:
    """Non-strings become ""; lone surrogates (valid JSON escapes) become U+FFFD."""
    if not isinstance(value, str):
        return ""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return value


# --- REQUESTS ---

class ChatMessage(BaseModel):
    """A single chat turn."""
    role: str = ""
    content: str = ""

    @field_validator("role", "content", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _string_or_empty(value)


class ChatCompletionRequest(BaseModel):
    """
    Request body for POST /v1/chat/completions.

    ``messages`` stays ``None`` when the client omitted it (or sent something
    that is not a list), which lets the generator substitute a default turn.
    """
    model: str = ""
    messages: Optional[List[ChatMessage]] = None

    @field_validator("model", mode="before")
    @classmethod
    def _coerce_model(cls, value: Any) -> str:
        return _string_or_empty(value)

    @field_validator("messages", mode="before")
    @classmethod
    def _coerce_messages(cls, value: Any) -> Optional[list]:
        if not isinstance(value, list):
            return None
        return [item if isinstance(item, dict) else {} for item in value]


class EmbeddingRequest(BaseModel):
    """
    Request body for POST /v1/embeddings.

    ``input`` accepts either a list of strings or a single string, like the
    real API does.
    """
    model: str = ""
    input: Optional[List[str]] = None

    @field_validator("model", mode="before")
    @classmethod
    def _coerce_model(cls, value: Any) -> str:
        return _string_or_empty(value)

    @field_validator("input", mode="before")
    @classmethod
    def _coerce_input(cls, value: Any) -> Optional[list]:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            return None
        return [_string_or_empty(item) for item in value]


# --- RESPONSES ---

class ChatChoice(BaseModel):
    index: int
    message: ChatMessage
    finish_reason: str = "stop"


class ChatUsage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletionResponse(BaseModel):
    id: str
    object: Literal["chat.completion"] = "chat.completion"
    created: int
    model: str
    choices: List[ChatChoice]
    usage: ChatUsage


class EmbeddingData(BaseModel):
    object: Literal["embedding"] = "embedding"
    embedding: List[float]
    index: int


class EmbeddingUsage(BaseModel):
    prompt_tokens: int = 0
    total_tokens: int = 0


class EmbeddingResponse(BaseModel):
    object: Literal["list"] = "list"
    data: List[EmbeddingData]
    model: str
    usage: EmbeddingUsage


class ModelCard(BaseModel):
    id: str
    object: Literal["model"] = "model"
    created: int
    owned_by: str


class ModelsResponse(BaseModel):
    object: Literal["list"] = "list"
    data: List[ModelCard]


class ErrorDetail(BaseModel):
    message: str
    type: str = "invalid_request_error"
    param: Optional[str] = "model"
    code: str = "model_not_found"


class ErrorResponse(BaseModel):
    """Error envelope in the shape OpenAI clients expect."""
    error: ErrorDetail
