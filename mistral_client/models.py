"""Pydantic models for the Mistral client."""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Model(str, Enum):
    """Well-known model identifiers."""

    MISTRAL_7B = "open-mistral-7b"
    MIXTRAL = "open-mixtral-8x7b"
    SMALL = "mistral-small-latest"
    MEDIUM = "mistral-medium-latest"
    LARGE = "mistral-large-latest"
    MINISTRAL_8B = "ministral-8b-latest"
    MAGISTRAL_MEDIUM = "magistral-medium-latest"
    CODESTRAL = "codestral-latest"
    PIXTRAL_LARGE = "pixtral-large-latest"
    PIXTRAL_12B = "pixtral-12b-latest"
    VOXTRAL_SMALL = "voxtral-small-latest"
    EMBED = "mistral-embed"
    MODERATION = "mistral-moderation-latest"
    OCR = "mistral-ocr-latest"

    @classmethod
    def with_json_mode_support(cls) -> list[str]:
        return [
            "mistral-small-latest",
            "mistral-small-2402",
            "mistral-large-latest",
            "mistral-large-2402",
            "ministral-8b-latest",
            "magistral-medium-latest",
            "pixtral-large-latest",
            "pixtral-12b-latest",
        ]


class FilePurpose(str, Enum):
    FINE_TUNE = "fine-tune"
    BATCH = "batch"
    OCR = "ocr"


class TranscriptionFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    VERBOSE_JSON = "verbose_json"


class Message(BaseModel):
    role: str
    content: Optional[str] = None
    name: Optional[str] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[list[ToolCall]] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class FunctionCall(BaseModel):
    name: str
    arguments: str


class ToolCall(BaseModel):
    id: Optional[str] = None
    type: str = "function"
    function: FunctionCall


Message.model_rebuild()


# -- chat ---------------------------------------------------------------------


class ChatCompletionMessage(BaseModel):
    role: str
    content: Optional[str] = None
    tool_calls: Optional[list[ToolCall]] = None


class ChatCompletionChoice(BaseModel):
    index: int
    message: ChatCompletionMessage
    finish_reason: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    """Result from a blocking chat() call."""

    id: str
    object: str = "chat.completion"
    created: int = 0
    model: str
    choices: list[ChatCompletionChoice]
    usage: Usage = Field(default_factory=Usage)


class StreamedChatCompletionDelta(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None
    tool_calls: Optional[list[ToolCall]] = None


class StreamedChatCompletionChoice(BaseModel):
    index: int = 0
    delta: StreamedChatCompletionDelta = Field(default_factory=StreamedChatCompletionDelta)
    finish_reason: Optional[str] = None


class StreamedChatCompletionResponse(BaseModel):
    """A single chunk from a streaming chat response."""

    id: str
    object: Optional[str] = None
    created: Optional[int] = None
    model: str
    choices: list[StreamedChatCompletionChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None


class SimpleChatResponse(BaseModel):
    """Chat completion flattened to its first choice."""

    id: str
    object: str
    created: datetime
    model: str
    role: str
    content: str
    finish_reason: Optional[str] = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def content_as_json(self) -> Optional[Any]:
        """Parse the content as JSON, or return None if it is not JSON."""
        try:
            return json.loads(self.content)
        except json.JSONDecodeError:
            return None


class SimpleStreamChunk(BaseModel):
    """A streamed chat chunk flattened to its first choice."""

    id: Optional[str] = None
    model: Optional[str] = None
    object: Optional[str] = None
    created: Optional[datetime] = None
    role: Optional[str] = None
    content: Optional[str] = None
    finish_reason: Optional[str] = None


# -- fim ----------------------------------------------------------------------


class FIMChoice(BaseModel):
    index: int
    message: ChatCompletionMessage
    finish_reason: Optional[str] = None


class FIMCompletionResponse(BaseModel):
    id: str
    object: str = "fim.completion"
    created: int = 0
    model: str
    choices: list[FIMChoice]
    usage: Usage = Field(default_factory=Usage)


class StreamedFIMDelta(BaseModel):
    content: Optional[str] = None


class StreamedFIMChoice(BaseModel):
    index: int = 0
    delta: StreamedFIMDelta = Field(default_factory=StreamedFIMDelta)
    finish_reason: Optional[str] = None


class StreamedFIMCompletionResponse(BaseModel):
    """A single chunk from a streaming FIM response."""

    id: str
    object: Optional[str] = None
    created: Optional[int] = None
    model: str
    choices: list[StreamedFIMChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None


# -- embeddings ---------------------------------------------------------------


class Embedding(BaseModel):
    object: Optional[str] = None
    embedding: list[float] = Field(default_factory=list)
    index: Optional[int] = None


class EmbeddingResponse(BaseModel):
    id: Optional[str] = None
    object: Optional[str] = None
    data: list[Embedding]
    model: Optional[str] = None
    usage: Optional[Usage] = None


# -- models -------------------------------------------------------------------


class ModelInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "model"
    created: int = 0
    owned_by: str = "mistralai"
    type: Optional[str] = None
    root: Optional[str] = None
    parent: Optional[str] = None

    @property
    def fine_tuned(self) -> bool:
        return self.type == "fine-tuned"


class DeleteModelOut(BaseModel):
    id: str
    object: str = "model"
    deleted: bool = True


# -- moderation ---------------------------------------------------------------


class ModerationCategories(BaseModel):
    sexual: bool = False
    hate_and_discrimination: bool = False
    violence_and_threats: bool = False
    dangerous_and_criminal_content: bool = False
    selfharm: bool = False
    health: bool = False
    financial: bool = False
    law: bool = False
    pii: bool = False


class ModerationCategoryScores(BaseModel):
    sexual: float = 0.0
    hate_and_discrimination: float = 0.0
    violence_and_threats: float = 0.0
    dangerous_and_criminal_content: float = 0.0
    selfharm: float = 0.0
    health: float = 0.0
    financial: float = 0.0
    law: float = 0.0
    pii: float = 0.0


class ModerationResult(BaseModel):
    categories: ModerationCategories = Field(default_factory=ModerationCategories)
    category_scores: ModerationCategoryScores = Field(default_factory=ModerationCategoryScores)
    flagged: Optional[bool] = None

    def is_flagged(self) -> bool:
        """Return ``flagged`` when the API sent it, else whether any category is set."""
        if self.flagged is not None:
            return self.flagged
        return any(self.categories.model_dump().values())


class ModerationResponse(BaseModel):
    id: str
    model: str
    results: list[ModerationResult]


# -- audio --------------------------------------------------------------------


class TranscriptionWord(BaseModel):
    word: str
    start: float
    end: float


class TranscriptionSegment(BaseModel):
    id: int = 0
    seek: int = 0
    start: float
    end: float
    text: str
    tokens: list[int] = Field(default_factory=list)
    temperature: float = 0.0
    avg_logprob: float = 0.0
    compression_ratio: float = 0.0
    no_speech_prob: float = 0.0


class TranscriptionResponse(BaseModel):
    text: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[float] = None
    words: Optional[list[TranscriptionWord]] = None
    segments: Optional[list[TranscriptionSegment]] = None

    def full_text(self) -> Optional[str]:
        """Return ``text``, falling back to the segment texts joined by spaces."""
        if self.text is not None:
            return self.text
        if not self.segments:
            return None
        return " ".join(s.text for s in self.segments)


# -- conversations ------------------------------------------------------------


class ConversationRequest(BaseModel):
    """Body for creating, appending to, or restarting a conversation.

    ``inputs`` is a plain string or a list of message entries. A new
    conversation needs either ``model`` or ``agent_id``.
    """

    inputs: Union[str, list[dict[str, Any]]]
    model: Optional[str] = None
    agent_id: Optional[str] = None
    instructions: Optional[str] = None
    tools: Optional[list[dict[str, Any]]] = None
    completion_args: Optional[dict[str, Any]] = None
    store: Optional[bool] = None
    handoff_execution: Optional[str] = None
    from_entry_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    def to_body(self, stream: bool) -> dict[str, Any]:
        body = self.model_dump(exclude_none=True)
        body["stream"] = stream
        return body


class ConversationEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    object: Optional[str] = None
    type: Optional[str] = None
    created_at: Optional[datetime] = None
    role: Optional[str] = None
    content: Optional[Union[str, list[dict[str, Any]]]] = None
    tool_calls: Optional[list[dict[str, Any]]] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class ConversationResponse(BaseModel):
    conversation_id: str
    outputs: list[ConversationEntry] = Field(default_factory=list)
    usage: Optional[Usage] = None


class ConversationHistory(BaseModel):
    conversation_id: Optional[str] = None
    entries: list[ConversationEntry] = Field(default_factory=list)


class ConversationMessages(BaseModel):
    conversation_id: Optional[str] = None
    messages: list[ConversationEntry] = Field(default_factory=list)


class ConversationList(BaseModel):
    object: str = "list"
    data: list[dict[str, Any]] = Field(default_factory=list)
    has_more: bool = False
    first_id: Optional[str] = None
    last_id: Optional[str] = None


# -- files --------------------------------------------------------------------


class FileObject(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "file"
    bytes: int = 0
    created_at: int = 0
    filename: str
    purpose: Optional[str] = None
    sample_type: Optional[str] = None
    num_lines: Optional[int] = None
    source: Optional[str] = None
    deleted: Optional[bool] = None


class ListFilesOut(BaseModel):
    object: str = "list"
    data: list[FileObject] = Field(default_factory=list)
    total: int = 0


class DeleteFileOut(BaseModel):
    id: str
    object: str = "file"
    deleted: bool = True


class FileSignedURL(BaseModel):
    url: str


# -- ocr ----------------------------------------------------------------------


class OCRDimensions(BaseModel):
    dpi: int
    height: int
    width: int


class OCRImage(BaseModel):
    id: str
    top_left_x: Optional[int] = None
    top_left_y: Optional[int] = None
    bottom_right_x: Optional[int] = None
    bottom_right_y: Optional[int] = None
    image_base64: Optional[str] = None
    image_annotation: Optional[str] = None


class OCRPage(BaseModel):
    index: int
    markdown: str = ""
    images: list[OCRImage] = Field(default_factory=list)
    dimensions: Optional[OCRDimensions] = None


class OCRUsageInfo(BaseModel):
    pages_processed: int = 0
    doc_size_bytes: Optional[int] = None


class OCRResponse(BaseModel):
    pages: list[OCRPage] = Field(default_factory=list)
    model: str
    document_annotation: Optional[str] = None
    usage_info: Optional[OCRUsageInfo] = None

    def markdown(self) -> str:
        """All page markdown joined by blank lines, in page order."""
        return "\n\n".join(p.markdown for p in sorted(self.pages, key=lambda p: p.index))


# -- agents -------------------------------------------------------------------


class Agent(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    object: str = "agent"
    created_at: Union[int, str, None] = None
    name: str
    model: str
    instructions: Optional[str] = None
    description: Optional[str] = None
    tools: Optional[list[dict[str, Any]]] = None
    completion_args: Optional[dict[str, Any]] = None
    handoffs: Optional[list[str]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    version: int = 1


class AgentList(BaseModel):
    object: str = "list"
    data: list[Agent] = Field(default_factory=list)
    total: Optional[int] = None


# -- classifications ----------------------------------------------------------


class ClassificationResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    predicted_class: Optional[str] = None
    categories: dict[str, Any] = Field(default_factory=dict)
    category_scores: dict[str, float] = Field(default_factory=dict)


class ClassificationResponse(BaseModel):
    id: str
    model: str
    results: list[ClassificationResult] = Field(default_factory=list)


# -- errors -------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Error payload from a failed request.

    Only ``type`` is expected to be a plain string; the API has been seen to
    send an object as ``message`` (validation failures) and numbers as ``code``.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    message: Any = None
    param: Any = None
    code: Any = None


# -- requests -----------------------------------------------------------------


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("model", mode="before", check_fields=False)
    @classmethod
    def _enum_to_value(cls, v: Any) -> Any:
        return v.value if isinstance(v, Enum) else v

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def _message_dicts(messages: list[Any]) -> list[Any]:
    return [m.model_dump(exclude_none=True) if isinstance(m, BaseModel) else m for m in messages]


class ChatCompletionRequest(_RequestModel):
    """Body of a chat completion request. ``None`` fields are not sent."""

    model: str
    messages: list[dict[str, Any]]
    stream: bool = False
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    safe_prompt: Optional[bool] = None
    random_seed: Optional[int] = None
    tools: Optional[list[dict[str, Any]]] = None
    tool_choice: Optional[Union[str, dict[str, Any]]] = None
    parallel_tool_calls: Optional[bool] = None
    response_format: Optional[dict[str, Any]] = None
    stop: Optional[Union[str, list[str]]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    n: Optional[int] = None
    prediction: Optional[dict[str, Any]] = None

    @field_validator("messages", mode="before")
    @classmethod
    def _dump_messages(cls, v: Any) -> Any:
        return _message_dicts(v) if isinstance(v, list) else v


class FIMCompletionRequest(_RequestModel):
    model: str
    prompt: str
    suffix: Optional[str] = None
    stream: bool = False
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    min_tokens: Optional[int] = None
    random_seed: Optional[int] = None
    stop: Optional[Union[str, list[str]]] = None


class EmbeddingRequest(_RequestModel):
    model: str
    input: Union[str, list[str]]
    encoding_format: Optional[str] = None


class ModerationRequest(_RequestModel):
    model: str
    input: Union[str, list[str]]


class ChatModerationRequest(_RequestModel):
    model: str
    input: list[dict[str, Any]]

    @field_validator("input", mode="before")
    @classmethod
    def _dump_messages(cls, v: Any) -> Any:
        return _message_dicts(v) if isinstance(v, list) else v


class ClassificationRequest(_RequestModel):
    model: str
    input: Union[str, list[str]]


class ChatClassificationRequest(_RequestModel):
    model: str
    input: list[dict[str, Any]]

    @field_validator("input", mode="before")
    @classmethod
    def _dump_messages(cls, v: Any) -> Any:
        return _message_dicts(v) if isinstance(v, list) else v


class TranscriptionRequest(_RequestModel):
    """Form fields of an audio transcription request (the file part is separate)."""

    model: str
    stream: bool = False
    language: Optional[str] = None
    prompt: Optional[str] = None
    response_format: Optional[TranscriptionFormat] = None
    temperature: Optional[float] = None
    timestamp_granularities: Optional[list[str]] = None

    def to_form(self) -> dict[str, Any]:
        """Multipart form fields. Scalars are sent as strings, lists as repeated fields."""
        form: dict[str, Any] = {}
        for key, value in self.model_dump(exclude_none=True, mode="json").items():
            if isinstance(value, bool):
                if value:
                    form[key] = "true"
            elif isinstance(value, list):
                if value:
                    form[key] = value
            else:
                form[key] = str(value)
        return form


_IMAGE_MIME_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/avif")


class OCRDocument(BaseModel):
    """The document to run OCR on: a document URL, an image URL, or an uploaded file."""

    type: str
    document_url: Optional[str] = None
    image_url: Optional[str] = None
    file_id: Optional[str] = None

    @classmethod
    def from_document_url(cls, url: str) -> OCRDocument:
        return cls(type="document_url", document_url=url)

    @classmethod
    def from_image_url(cls, url: str) -> OCRDocument:
        return cls(type="image_url", image_url=url)

    @classmethod
    def from_base64(cls, data: str, mime_type: str) -> OCRDocument:
        """Wrap base64 content in a data URL; image MIME types become image documents."""
        url = f"data:{mime_type};base64,{data}"
        if mime_type in _IMAGE_MIME_TYPES:
            return cls.from_image_url(url)
        return cls.from_document_url(url)

    @classmethod
    def from_file_id(cls, file_id: str) -> OCRDocument:
        return cls(type="file", file_id=file_id)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"type": self.type}
        if self.type == "document_url" and self.document_url is not None:
            body["document_url"] = self.document_url
        elif self.type == "image_url" and self.image_url is not None:
            body["image_url"] = {"url": self.image_url}
        elif self.type == "file" and self.file_id is not None:
            body["file_id"] = self.file_id
        return body


class OCRRequest(_RequestModel):
    model: str
    document: OCRDocument
    include_image_base64: Optional[bool] = None
    pages: Optional[list[int]] = None
    image_limit: Optional[int] = None
    image_min_size: Optional[int] = None

    def to_body(self) -> dict[str, Any]:
        body = self.model_dump(exclude_none=True, exclude={"document"})
        body["document"] = self.document.to_body()
        return body


class AgentCreateRequest(_RequestModel):
    model: str
    name: str
    instructions: Optional[str] = None
    description: Optional[str] = None
    tools: Optional[list[dict[str, Any]]] = None
    completion_args: Optional[dict[str, Any]] = None
    handoffs: Optional[list[str]] = None


class AgentUpdateRequest(_RequestModel):
    """Partial agent update; only fields that are set are sent."""

    model: Optional[str] = None
    name: Optional[str] = None
    instructions: Optional[str] = None
    description: Optional[str] = None
    tools: Optional[list[dict[str, Any]]] = None
    completion_args: Optional[dict[str, Any]] = None
    handoffs: Optional[list[str]] = None
