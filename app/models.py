"""
DATA MODELS MODULE
==================

Pydantic models for the AI endpoint. One request model per AI tool; the "type"
field of the incoming JSON picks which one validates the body. Each request
model knows how to turn itself into the message list sent upstream, so adding
a tool means adding a model and registering it in REQUEST_TYPES.

MODELS:
  ChatMessage        - One turn of the caller's chat history (user or assistant).
  UpstreamMessage    - One normalized message forwarded upstream (user or model).
  SummarizeRequest   - type "summarize": notes.
  QuizRequest        - type "quiz": notes, quizType, numQuestions.
  FlashcardsRequest  - type "flashcards": notes.
  PresentationRequest- type "presentation": notes.
  ChatRequest        - type "chat": messages (full history, oldest first).
  StudyPlanRequest   - type "study-plan": topic.
  AIResponse         - {"result": text} on success.
  ErrorResponse      - {"error": message} on any failure.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.exceptions import InvalidRequestError
from config import (
    FLASHCARDS_PROMPT,
    PRESENTATION_PROMPT,
    QUIZ_PROMPT,
    QUIZ_TYPE_DEFAULT_TEXT,
    QUIZ_TYPE_TEXTS,
    STUDY_PLAN_PROMPT,
    SUMMARIZE_PROMPT,
)


def quiz_type_instruction(quiz_type: str) -> str:
    """Instruction text for a quiz type; unknown types get the multiple-answer text."""
    return QUIZ_TYPE_TEXTS.get(quiz_type, QUIZ_TYPE_DEFAULT_TEXT)


def _require_text(value: str, field_name: str) -> str:
    # Checked on the trimmed value, but the untrimmed text goes into the prompt.
    if not value.strip():
        raise ValueError(f"{field_name} must not be empty")
    return value


# ==============================================================================
# MESSAGE MODELS
# ==============================================================================

class ChatMessage(BaseModel):
    """A single turn of chat history as the caller sends it."""
    role: Literal["user", "assistant"]
    content: str


class UpstreamMessage(BaseModel):
    """
    A normalized message for the upstream API. "model" is our name for the
    assistant side; the translator swaps in whatever label the upstream expects.
    """
    role: Literal["user", "model"]
    content: str

    def to_payload(self, model_role: str = "assistant") -> Dict[str, str]:
        role = "user" if self.role == "user" else model_role
        return {"role": role, "content": self.content}


# ==============================================================================
# REQUEST MODELS
# ==============================================================================

class AIRequestBase(BaseModel):
    """Every request type turns itself into the message list sent upstream."""
    model_config = ConfigDict(populate_by_name=True)

    @abstractmethod
    def to_messages(self) -> List[UpstreamMessage]:
        ...


class PromptRequest(AIRequestBase):
    """Single-turn requests: one user message holding the filled-in prompt template."""

    @abstractmethod
    def build_prompt(self) -> str:
        ...

    def to_messages(self) -> List[UpstreamMessage]:
        return [UpstreamMessage(role="user", content=self.build_prompt())]


class NotesRequest(PromptRequest):
    notes: str

    @field_validator("notes")
    @classmethod
    def notes_not_empty(cls, value: str) -> str:
        return _require_text(value, "notes")


class SummarizeRequest(NotesRequest):
    type: Literal["summarize"] = "summarize"

    def build_prompt(self) -> str:
        return SUMMARIZE_PROMPT.format(notes=self.notes)


class QuizRequest(NotesRequest):
    type: Literal["quiz"] = "quiz"
    # Plain str, not an enum: unrecognized values fall through to the default text.
    quiz_type: str = Field(..., alias="quizType")
    num_questions: int = Field(..., alias="numQuestions", gt=0)

    def build_prompt(self) -> str:
        return QUIZ_PROMPT.format(
            num_questions=self.num_questions,
            quiz_type_text=quiz_type_instruction(self.quiz_type),
            notes=self.notes,
        )


class FlashcardsRequest(NotesRequest):
    type: Literal["flashcards"] = "flashcards"

    def build_prompt(self) -> str:
        return FLASHCARDS_PROMPT.format(notes=self.notes)


class PresentationRequest(NotesRequest):
    type: Literal["presentation"] = "presentation"

    def build_prompt(self) -> str:
        return PRESENTATION_PROMPT.format(notes=self.notes)


class ChatRequest(AIRequestBase):
    """
    Chat has no synthesized prompt: the caller replays the whole history every
    call and we forward it as-is, same order, same length.
    """
    type: Literal["chat"] = "chat"
    messages: List[ChatMessage] = Field(..., min_length=1)

    def to_messages(self) -> List[UpstreamMessage]:
        return [
            UpstreamMessage(role="user" if msg.role == "user" else "model", content=msg.content)
            for msg in self.messages
        ]


class StudyPlanRequest(PromptRequest):
    type: Literal["study-plan"] = "study-plan"
    topic: str

    @field_validator("topic")
    @classmethod
    def topic_not_empty(cls, value: str) -> str:
        return _require_text(value, "topic")

    def build_prompt(self) -> str:
        return STUDY_PLAN_PROMPT.format(topic=self.topic)


AIRequest = Union[
    SummarizeRequest,
    QuizRequest,
    FlashcardsRequest,
    PresentationRequest,
    ChatRequest,
    StudyPlanRequest,
]

# "type" value -> model that validates that request.
REQUEST_TYPES = {
    "summarize": SummarizeRequest,
    "quiz": QuizRequest,
    "flashcards": FlashcardsRequest,
    "presentation": PresentationRequest,
    "chat": ChatRequest,
    "study-plan": StudyPlanRequest,
}


def parse_ai_request(payload: Dict[str, Any]) -> AIRequest:
    """
    Pick the request model from payload["type"] and validate the body with it.
    Unknown types raise InvalidRequestError("Invalid request type"); missing or
    empty fields raise InvalidRequestError naming the first bad field.
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    request_type = payload.get("type")
    model = REQUEST_TYPES.get(request_type) if isinstance(request_type, str) else None
    if model is None:
        raise InvalidRequestError("Invalid request type")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise InvalidRequestError(f"Invalid {request_type} request: {field} - {first['msg']}") from e


# ==============================================================================
# RESPONSE MODELS
# ==============================================================================

class AIResponse(BaseModel):
    """Success body: the model's text, verbatim."""
    result: str


class ErrorResponse(BaseModel):
    """Failure body. Every error kind is sent with status 500."""
    error: str
