"""Mistral sync and async clients."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Generator, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings
from .exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from .models import (
    Agent,
    AgentCreateRequest,
    AgentList,
    AgentUpdateRequest,
    ChatClassificationRequest,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatModerationRequest,
    ClassificationRequest,
    ClassificationResponse,
    ConversationHistory,
    ConversationList,
    ConversationMessages,
    ConversationRequest,
    ConversationResponse,
    DeleteFileOut,
    DeleteModelOut,
    EmbeddingRequest,
    EmbeddingResponse,
    ErrorDetail,
    FileObject,
    FilePurpose,
    FileSignedURL,
    FIMCompletionRequest,
    FIMCompletionResponse,
    ListFilesOut,
    Model,
    ModelInfo,
    ModerationRequest,
    ModerationResponse,
    OCRDocument,
    OCRRequest,
    OCRResponse,
    SimpleChatResponse,
    SimpleStreamChunk,
    StreamedChatCompletionResponse,
    StreamedFIMCompletionResponse,
    TranscriptionFormat,
    TranscriptionRequest,
    TranscriptionResponse,
)
from ._streaming import iter_sse_events, aiter_sse_events

logger = logging.getLogger(__name__)

_USER_AGENT = f"mistral-client-python/{__version__}"

_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
}

FileInput = Union[str, Path, tuple[str, bytes]]
AudioFile = FileInput


def _error_detail(data: dict[str, Any]) -> Any:
    try:
        return ErrorDetail.model_validate(data)
    except PydanticValidationError:
        return data


def _parse_error(resp: httpx.Response) -> Optional[Any]:
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("error"), dict):
        return _error_detail(data["error"])
    if "detail" in data:
        return data["detail"]
    if "message" in data:
        return _error_detail(data)
    return None


def _check_response(resp: httpx.Response) -> None:
    """Raise the matching APIError for a 4xx/5xx response. The body must be read."""
    if resp.status_code < 400:
        return
    exc_cls = _STATUS_ERRORS.get(resp.status_code, APIError)
    logger.debug("Mistral API error %s on %s %s", resp.status_code, resp.request.method, resp.request.url)
    raise exc_cls(
        f"HTTP {resp.status_code}: {resp.text}",
        status_code=resp.status_code,
        body=resp.text,
        detail=_parse_error(resp),
    )


def _build_headers(settings: Settings) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.api_key}",
        "Accept": "application/json",
        "User-Agent": _USER_AGENT,
    }


def _query(**params: Any) -> dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in params.items() if v is not None}


def _read_file(file: FileInput) -> tuple[str, bytes]:
    """Resolve a path or a (filename, bytes) tuple to a multipart file part."""
    if isinstance(file, tuple):
        return file
    p = Path(file)
    if not p.is_file():
        raise ValueError(f"file not found: {p}")
    return p.name, p.read_bytes()


def _build_transcription_form(
    file: AudioFile,
    request: TranscriptionRequest,
) -> tuple[dict[str, Any], dict[str, tuple[str, bytes]]]:
    """Build ``(data, files)`` for a multipart transcription request.

    Args:
        file: A file path, or a (filename, bytes) tuple.
        request: The form fields.

    Returns:
        ``(data, files)`` suitable for ``httpx`` multipart requests.
    """
    return request.to_form(), {"file": _read_file(file)}


def _build_upload_form(
    file: FileInput,
    purpose: Optional[Union[FilePurpose, str]],
) -> tuple[dict[str, Any], dict[str, tuple[str, bytes]]]:
    data = {"purpose": FilePurpose(purpose).value} if purpose is not None else {}
    return data, {"file": _read_file(file)}


def _ocr_document(document: Union[OCRDocument, str], mime_type: Optional[str]) -> OCRDocument:
    """Accept a ready document, an http(s) URL, or base64 content with its MIME type."""
    if isinstance(document, OCRDocument):
        return document
    if document.startswith(("http://", "https://")):
        return OCRDocument.from_document_url(document)
    if mime_type is None:
        raise ValueError("mime_type is required for base64 document content")
    return OCRDocument.from_base64(document, mime_type)


def _require_model_or_agent(request: ConversationRequest) -> None:
    if not request.model and not request.agent_id:
        raise ValueError("a conversation needs either model or agent_id")


def _parse_simple_chat(data: dict[str, Any]) -> SimpleChatResponse:
    choice = data["choices"][0]
    usage = data.get("usage") or {}
    return SimpleChatResponse(
        id=data["id"],
        object=data.get("object", "chat.completion"),
        created=data.get("created", 0),
        model=data["model"],
        role=choice["message"]["role"],
        content=choice["message"].get("content") or "",
        finish_reason=choice.get("finish_reason"),
        prompt_tokens=usage.get("prompt_tokens", 0),
        completion_tokens=usage.get("completion_tokens", 0),
        total_tokens=usage.get("total_tokens", 0),
    )


def _parse_simple_chunk(data: dict[str, Any]) -> SimpleStreamChunk:
    choice = (data.get("choices") or [{}])[0]
    delta = choice.get("delta") or {}
    return SimpleStreamChunk(
        id=data.get("id"),
        model=data.get("model"),
        object=data.get("object"),
        created=data.get("created"),
        role=delta.get("role"),
        content=delta.get("content"),
        finish_reason=choice.get("finish_reason"),
    )


def _parse_model_list(data: Any) -> list[ModelInfo]:
    return [ModelInfo(**m) for m in data.get("data", [])]


def _parse_conversation_list(data: Any) -> ConversationList:
    if isinstance(data, list):
        return ConversationList(data=data)
    return ConversationList(**data)


def _parse_uploaded_file(data: dict[str, Any]) -> FileObject:
    # some deployments wrap the uploaded file in {"data": {...}}
    if isinstance(data.get("data"), dict):
        data = data["data"]
    return FileObject(**data)


def _parse_agent_list(data: Any) -> AgentList:
    if isinstance(data, list):
        return AgentList(data=data)
    return AgentList(**data)


class MistralClient:
    """Synchronous Mistral client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._settings = Settings(api_key=api_key, base_url=base_url, timeout=timeout)
        self._client = httpx.Client(
            base_url=self._settings.base_url,
            headers=_build_headers(self._settings),
            timeout=self._settings.httpx_timeout,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> MistralClient:
        """Create a client from ``MISTRAL_API_KEY``/``MISTRAL_BASE_URL``/``MISTRAL_TIMEOUT``."""
        s = Settings.from_env(**overrides)
        return cls(api_key=s.api_key, base_url=s.base_url, timeout=s.timeout)

    # -- plumbing ------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        resp = self._client.request(method, path, **kwargs)
        _check_response(resp)
        return resp

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._send(method, path, **kwargs).json()

    def _stream(
        self,
        method: str,
        path: str,
        parse: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> Generator[Any, None, None]:
        """Yield decoded events; closing the generator closes the response."""
        logger.debug("%s %s (stream)", method, path)
        with self._client.stream(method, path, **kwargs) as resp:
            if resp.status_code >= 400:
                resp.read()
            _check_response(resp)
            for event in iter_sse_events(resp):
                yield parse(event) if parse else event

    # -- chat ----------------------------------------------------------------

    def chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> ChatCompletionResponse:
        """Create a chat completion.

        ``options`` are the optional fields of :class:`ChatCompletionRequest`
        (temperature, max_tokens, tools, response_format, stop, ...).
        """
        body = ChatCompletionRequest(model=model, messages=messages, stream=False, **options)
        return ChatCompletionResponse(**self._request("POST", "/chat/completions", json=body.to_body()))

    def stream_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> Generator[StreamedChatCompletionResponse, None, None]:
        body = ChatCompletionRequest(model=model, messages=messages, stream=True, **options)
        return self._stream(
            "POST", "/chat/completions", StreamedChatCompletionResponse.model_validate, json=body.to_body()
        )

    def simple_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> SimpleChatResponse:
        body = ChatCompletionRequest(model=model, messages=messages, stream=False, **options)
        return _parse_simple_chat(self._request("POST", "/chat/completions", json=body.to_body()))

    def stream_simple_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> Generator[SimpleStreamChunk, None, None]:
        body = ChatCompletionRequest(model=model, messages=messages, stream=True, **options)
        return self._stream("POST", "/chat/completions", _parse_simple_chunk, json=body.to_body())

    # -- fim -----------------------------------------------------------------

    def fim(
        self,
        prompt: str,
        model: Union[Model, str] = Model.CODESTRAL,
        suffix: Optional[str] = None,
        **options: Any,
    ) -> FIMCompletionResponse:
        body = FIMCompletionRequest(model=model, prompt=prompt, suffix=suffix, stream=False, **options)
        return FIMCompletionResponse(**self._request("POST", "/fim/completions", json=body.to_body()))

    def stream_fim(
        self,
        prompt: str,
        model: Union[Model, str] = Model.CODESTRAL,
        suffix: Optional[str] = None,
        **options: Any,
    ) -> Generator[StreamedFIMCompletionResponse, None, None]:
        body = FIMCompletionRequest(model=model, prompt=prompt, suffix=suffix, stream=True, **options)
        return self._stream(
            "POST", "/fim/completions", StreamedFIMCompletionResponse.model_validate, json=body.to_body()
        )

    # -- embeddings, models, moderation, classification ----------------------

    def embed(
        self,
        input: Union[str, list[str]],
        model: Union[Model, str] = Model.EMBED,
        encoding_format: Optional[str] = "float",
    ) -> EmbeddingResponse:
        body = EmbeddingRequest(model=model, input=input, encoding_format=encoding_format)
        return EmbeddingResponse(**self._request("POST", "/embeddings", json=body.to_body()))

    def list_models(self) -> list[ModelInfo]:
        return _parse_model_list(self._request("GET", "/models"))

    def retrieve_model(self, model_id: str) -> ModelInfo:
        return ModelInfo(**self._request("GET", f"/models/{model_id}"))

    def delete_model(self, model_id: str) -> DeleteModelOut:
        return DeleteModelOut(**self._request("DELETE", f"/models/{model_id}"))

    def moderate(
        self,
        input: Union[str, list[str]],
        model: Union[Model, str] = Model.MODERATION,
    ) -> ModerationResponse:
        body = ModerationRequest(model=model, input=input)
        return ModerationResponse(**self._request("POST", "/moderations", json=body.to_body()))

    def moderate_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.MODERATION,
    ) -> ModerationResponse:
        body = ChatModerationRequest(model=model, input=messages)
        return ModerationResponse(**self._request("POST", "/chat/moderations", json=body.to_body()))

    def classify(self, input: Union[str, list[str]], model: str) -> ClassificationResponse:
        """Classify text with a classifier model (usually a fine-tuned one)."""
        body = ClassificationRequest(model=model, input=input)
        return ClassificationResponse(**self._request("POST", "/classifications", json=body.to_body()))

    def classify_chat(self, messages: list[Any], model: str) -> ClassificationResponse:
        body = ChatClassificationRequest(model=model, input=messages)
        return ClassificationResponse(**self._request("POST", "/chat/classifications", json=body.to_body()))

    # -- audio ---------------------------------------------------------------

    def transcribe(
        self,
        file: AudioFile,
        model: Union[Model, str] = Model.VOXTRAL_SMALL,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        response_format: Optional[Union[TranscriptionFormat, str]] = None,
        temperature: Optional[float] = None,
        timestamp_granularities: Optional[list[str]] = None,
    ) -> TranscriptionResponse:
        """Transcribe an audio file given as a path or a (filename, bytes) tuple."""
        request = TranscriptionRequest(
            model=model, language=language, prompt=prompt, response_format=response_format,
            temperature=temperature, timestamp_granularities=timestamp_granularities,
        )
        data, files = _build_transcription_form(file, request)
        return TranscriptionResponse(**self._request("POST", "/audio/transcriptions", data=data, files=files))

    def stream_transcription(
        self,
        file: AudioFile,
        model: Union[Model, str] = Model.VOXTRAL_SMALL,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        response_format: Optional[Union[TranscriptionFormat, str]] = None,
        temperature: Optional[float] = None,
        timestamp_granularities: Optional[list[str]] = None,
    ) -> Generator[dict[str, Any], None, None]:
        """Stream transcription events as decoded dicts."""
        request = TranscriptionRequest(
            model=model, stream=True, language=language, prompt=prompt, response_format=response_format,
            temperature=temperature, timestamp_granularities=timestamp_granularities,
        )
        data, files = _build_transcription_form(file, request)
        return self._stream("POST", "/audio/transcriptions", data=data, files=files)

    # -- files ---------------------------------------------------------------

    def upload_file(self, file: FileInput, purpose: Optional[Union[FilePurpose, str]] = None) -> FileObject:
        data, files = _build_upload_form(file, purpose)
        return _parse_uploaded_file(self._request("POST", "/files", data=data, files=files))

    def list_files(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        sample_type: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
        purpose: Optional[Union[FilePurpose, str]] = None,
    ) -> ListFilesOut:
        params = _query(
            page=page, page_size=page_size, sample_type=sample_type, source=source, search=search, purpose=purpose
        )
        return ListFilesOut(**self._request("GET", "/files", params=params))

    def retrieve_file(self, file_id: str) -> FileObject:
        return FileObject(**self._request("GET", f"/files/{file_id}"))

    def delete_file(self, file_id: str) -> DeleteFileOut:
        return DeleteFileOut(**self._request("DELETE", f"/files/{file_id}"))

    def download_file(self, file_id: str) -> bytes:
        return self._send("GET", f"/files/{file_id}/content").content

    def get_signed_url(self, file_id: str, expiry: Optional[int] = None) -> FileSignedURL:
        """Get a temporary download URL; ``expiry`` is in hours."""
        return FileSignedURL(**self._request("GET", f"/files/{file_id}/url", params=_query(expiry=expiry)))

    # -- ocr -----------------------------------------------------------------

    def ocr(
        self,
        document: Union[OCRDocument, str],
        model: Union[Model, str] = Model.OCR,
        mime_type: Optional[str] = None,
        include_image_base64: Optional[bool] = None,
        **options: Any,
    ) -> OCRResponse:
        """Run OCR on a document.

        ``document`` is an :class:`OCRDocument`, an http(s) URL, or base64
        content (which needs ``mime_type``). ``options`` are the optional
        fields of :class:`OCRRequest` (pages, image_limit, image_min_size).
        """
        body = OCRRequest(
            model=model,
            document=_ocr_document(document, mime_type),
            include_image_base64=include_image_base64,
            **options,
        )
        return OCRResponse(**self._request("POST", "/ocr", json=body.to_body()))

    # -- agents --------------------------------------------------------------

    def create_agent(self, model: Union[Model, str], name: str, **options: Any) -> Agent:
        body = AgentCreateRequest(model=model, name=name, **options)
        return Agent(**self._request("POST", "/agents", json=body.to_body()))

    def list_agents(self, page: Optional[int] = None, page_size: Optional[int] = None) -> AgentList:
        return _parse_agent_list(self._request("GET", "/agents", params=_query(page=page, page_size=page_size)))

    def get_agent(self, agent_id: str) -> Agent:
        return Agent(**self._request("GET", f"/agents/{agent_id}"))

    def update_agent(self, agent_id: str, **changes: Any) -> Agent:
        body = AgentUpdateRequest(**changes)
        return Agent(**self._request("PATCH", f"/agents/{agent_id}", json=body.to_body()))

    def update_agent_version(self, agent_id: str, version: int) -> Agent:
        return Agent(**self._request("PATCH", f"/agents/{agent_id}/version", params={"version": version}))

    # -- conversations -------------------------------------------------------

    def create_conversation(self, request: ConversationRequest) -> ConversationResponse:
        _require_model_or_agent(request)
        return ConversationResponse(**self._request("POST", "/conversations", json=request.to_body(stream=False)))

    def stream_conversation(self, request: ConversationRequest) -> Generator[dict[str, Any], None, None]:
        _require_model_or_agent(request)
        return self._stream("POST", "/conversations", json=request.to_body(stream=True))

    def append_conversation(self, conversation_id: str, request: ConversationRequest) -> ConversationResponse:
        return ConversationResponse(
            **self._request("POST", f"/conversations/{conversation_id}", json=request.to_body(stream=False))
        )

    def stream_append_conversation(
        self, conversation_id: str, request: ConversationRequest
    ) -> Generator[dict[str, Any], None, None]:
        return self._stream("POST", f"/conversations/{conversation_id}", json=request.to_body(stream=True))

    def restart_conversation(self, conversation_id: str, request: ConversationRequest) -> ConversationResponse:
        return ConversationResponse(
            **self._request("POST", f"/conversations/{conversation_id}/restart", json=request.to_body(stream=False))
        )

    def stream_restart_conversation(
        self, conversation_id: str, request: ConversationRequest
    ) -> Generator[dict[str, Any], None, None]:
        return self._stream(
            "POST", f"/conversations/{conversation_id}/restart", json=request.to_body(stream=True)
        )

    def get_conversation(self, conversation_id: str) -> dict[str, Any]:
        return self._request("GET", f"/conversations/{conversation_id}")

    def list_conversations(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        order: Optional[str] = None,
    ) -> ConversationList:
        params = _query(page=page, page_size=page_size, order=order)
        return _parse_conversation_list(self._request("GET", "/conversations", params=params))

    def get_conversation_history(self, conversation_id: str) -> ConversationHistory:
        return ConversationHistory(**self._request("GET", f"/conversations/{conversation_id}/history"))

    def get_conversation_messages(self, conversation_id: str) -> ConversationMessages:
        return ConversationMessages(**self._request("GET", f"/conversations/{conversation_id}/messages"))

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class AsyncMistralClient:
    """Asynchronous Mistral client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._settings = Settings(api_key=api_key, base_url=base_url, timeout=timeout)
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            headers=_build_headers(self._settings),
            timeout=self._settings.httpx_timeout,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> AsyncMistralClient:
        s = Settings.from_env(**overrides)
        return cls(api_key=s.api_key, base_url=s.base_url, timeout=s.timeout)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        resp = await self._client.request(method, path, **kwargs)
        _check_response(resp)
        return resp

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return (await self._send(method, path, **kwargs)).json()

    async def _stream(
        self,
        method: str,
        path: str,
        parse: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> AsyncGenerator[Any, None]:
        logger.debug("%s %s (stream)", method, path)
        async with self._client.stream(method, path, **kwargs) as resp:
            if resp.status_code >= 400:
                await resp.aread()
            _check_response(resp)
            async for event in aiter_sse_events(resp):
                yield parse(event) if parse else event

    async def chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> ChatCompletionResponse:
        body = ChatCompletionRequest(model=model, messages=messages, stream=False, **options)
        return ChatCompletionResponse(**await self._request("POST", "/chat/completions", json=body.to_body()))

    def stream_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> AsyncGenerator[StreamedChatCompletionResponse, None]:
        body = ChatCompletionRequest(model=model, messages=messages, stream=True, **options)
        return self._stream(
            "POST", "/chat/completions", StreamedChatCompletionResponse.model_validate, json=body.to_body()
        )

    async def simple_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> SimpleChatResponse:
        body = ChatCompletionRequest(model=model, messages=messages, stream=False, **options)
        return _parse_simple_chat(await self._request("POST", "/chat/completions", json=body.to_body()))

    def stream_simple_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.SMALL,
        **options: Any,
    ) -> AsyncGenerator[SimpleStreamChunk, None]:
        body = ChatCompletionRequest(model=model, messages=messages, stream=True, **options)
        return self._stream("POST", "/chat/completions", _parse_simple_chunk, json=body.to_body())

    async def fim(
        self,
        prompt: str,
        model: Union[Model, str] = Model.CODESTRAL,
        suffix: Optional[str] = None,
        **options: Any,
    ) -> FIMCompletionResponse:
        body = FIMCompletionRequest(model=model, prompt=prompt, suffix=suffix, stream=False, **options)
        return FIMCompletionResponse(**await self._request("POST", "/fim/completions", json=body.to_body()))

    def stream_fim(
        self,
        prompt: str,
        model: Union[Model, str] = Model.CODESTRAL,
        suffix: Optional[str] = None,
        **options: Any,
    ) -> AsyncGenerator[StreamedFIMCompletionResponse, None]:
        body = FIMCompletionRequest(model=model, prompt=prompt, suffix=suffix, stream=True, **options)
        return self._stream(
            "POST", "/fim/completions", StreamedFIMCompletionResponse.model_validate, json=body.to_body()
        )

    async def embed(
        self,
        input: Union[str, list[str]],
        model: Union[Model, str] = Model.EMBED,
        encoding_format: Optional[str] = "float",
    ) -> EmbeddingResponse:
        body = EmbeddingRequest(model=model, input=input, encoding_format=encoding_format)
        return EmbeddingResponse(**await self._request("POST", "/embeddings", json=body.to_body()))

    async def list_models(self) -> list[ModelInfo]:
        return _parse_model_list(await self._request("GET", "/models"))

    async def retrieve_model(self, model_id: str) -> ModelInfo:
        return ModelInfo(**await self._request("GET", f"/models/{model_id}"))

    async def delete_model(self, model_id: str) -> DeleteModelOut:
        return DeleteModelOut(**await self._request("DELETE", f"/models/{model_id}"))

    async def moderate(
        self,
        input: Union[str, list[str]],
        model: Union[Model, str] = Model.MODERATION,
    ) -> ModerationResponse:
        body = ModerationRequest(model=model, input=input)
        return ModerationResponse(**await self._request("POST", "/moderations", json=body.to_body()))

    async def moderate_chat(
        self,
        messages: list[Any],
        model: Union[Model, str] = Model.MODERATION,
    ) -> ModerationResponse:
        body = ChatModerationRequest(model=model, input=messages)
        return ModerationResponse(**await self._request("POST", "/chat/moderations", json=body.to_body()))

    async def classify(self, input: Union[str, list[str]], model: str) -> ClassificationResponse:
        body = ClassificationRequest(model=model, input=input)
        return ClassificationResponse(**await self._request("POST", "/classifications", json=body.to_body()))

    async def classify_chat(self, messages: list[Any], model: str) -> ClassificationResponse:
        body = ChatClassificationRequest(model=model, input=messages)
        return ClassificationResponse(
            **await self._request("POST", "/chat/classifications", json=body.to_body())
        )

    async def transcribe(
        self,
        file: AudioFile,
        model: Union[Model, str] = Model.VOXTRAL_SMALL,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        response_format: Optional[Union[TranscriptionFormat, str]] = None,
        temperature: Optional[float] = None,
        timestamp_granularities: Optional[list[str]] = None,
    ) -> TranscriptionResponse:
        request = TranscriptionRequest(
            model=model, language=language, prompt=prompt, response_format=response_format,
            temperature=temperature, timestamp_granularities=timestamp_granularities,
        )
        data, files = _build_transcription_form(file, request)
        return TranscriptionResponse(
            **await self._request("POST", "/audio/transcriptions", data=data, files=files)
        )

    def stream_transcription(
        self,
        file: AudioFile,
        model: Union[Model, str] = Model.VOXTRAL_SMALL,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        response_format: Optional[Union[TranscriptionFormat, str]] = None,
        temperature: Optional[float] = None,
        timestamp_granularities: Optional[list[str]] = None,
    ) -> AsyncGenerator[dict[str, Any], None]:
        request = TranscriptionRequest(
            model=model, stream=True, language=language, prompt=prompt, response_format=response_format,
            temperature=temperature, timestamp_granularities=timestamp_granularities,
        )
        data, files = _build_transcription_form(file, request)
        return self._stream("POST", "/audio/transcriptions", data=data, files=files)

    async def upload_file(
        self, file: FileInput, purpose: Optional[Union[FilePurpose, str]] = None
    ) -> FileObject:
        data, files = _build_upload_form(file, purpose)
        return _parse_uploaded_file(await self._request("POST", "/files", data=data, files=files))

    async def list_files(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        sample_type: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
        purpose: Optional[Union[FilePurpose, str]] = None,
    ) -> ListFilesOut:
        params = _query(
            page=page, page_size=page_size, sample_type=sample_type, source=source, search=search, purpose=purpose
        )
        return ListFilesOut(**await self._request("GET", "/files", params=params))

    async def retrieve_file(self, file_id: str) -> FileObject:
        return FileObject(**await self._request("GET", f"/files/{file_id}"))

    async def delete_file(self, file_id: str) -> DeleteFileOut:
        return DeleteFileOut(**await self._request("DELETE", f"/files/{file_id}"))

    async def download_file(self, file_id: str) -> bytes:
        return (await self._send("GET", f"/files/{file_id}/content")).content

    async def get_signed_url(self, file_id: str, expiry: Optional[int] = None) -> FileSignedURL:
        return FileSignedURL(
            **await self._request("GET", f"/files/{file_id}/url", params=_query(expiry=expiry))
        )

    async def ocr(
        self,
        document: Union[OCRDocument, str],
        model: Union[Model, str] = Model.OCR,
        mime_type: Optional[str] = None,
        include_image_base64: Optional[bool] = None,
        **options: Any,
    ) -> OCRResponse:
        body = OCRRequest(
            model=model,
            document=_ocr_document(document, mime_type),
            include_image_base64=include_image_base64,
            **options,
        )
        return OCRResponse(**await self._request("POST", "/ocr", json=body.to_body()))

    async def create_agent(self, model: Union[Model, str], name: str, **options: Any) -> Agent:
        body = AgentCreateRequest(model=model, name=name, **options)
        return Agent(**await self._request("POST", "/agents", json=body.to_body()))

    async def list_agents(self, page: Optional[int] = None, page_size: Optional[int] = None) -> AgentList:
        return _parse_agent_list(
            await self._request("GET", "/agents", params=_query(page=page, page_size=page_size))
        )

    async def get_agent(self, agent_id: str) -> Agent:
        return Agent(**await self._request("GET", f"/agents/{agent_id}"))

    async def update_agent(self, agent_id: str, **changes: Any) -> Agent:
        body = AgentUpdateRequest(**changes)
        return Agent(**await self._request("PATCH", f"/agents/{agent_id}", json=body.to_body()))

    async def update_agent_version(self, agent_id: str, version: int) -> Agent:
        return Agent(
            **await self._request("PATCH", f"/agents/{agent_id}/version", params={"version": version})
        )

    async def create_conversation(self, request: ConversationRequest) -> ConversationResponse:
        _require_model_or_agent(request)
        return ConversationResponse(
            **await self._request("POST", "/conversations", json=request.to_body(stream=False))
        )

    def stream_conversation(self, request: ConversationRequest) -> AsyncGenerator[dict[str, Any], None]:
        _require_model_or_agent(request)
        return self._stream("POST", "/conversations", json=request.to_body(stream=True))

    async def append_conversation(self, conversation_id: str, request: ConversationRequest) -> ConversationResponse:
        return ConversationResponse(
            **await self._request("POST", f"/conversations/{conversation_id}", json=request.to_body(stream=False))
        )

    def stream_append_conversation(
        self, conversation_id: str, request: ConversationRequest
    ) -> AsyncGenerator[dict[str, Any], None]:
        return self._stream("POST", f"/conversations/{conversation_id}", json=request.to_body(stream=True))

    async def restart_conversation(self, conversation_id: str, request: ConversationRequest) -> ConversationResponse:
        return ConversationResponse(
            **await self._request(
                "POST", f"/conversations/{conversation_id}/restart", json=request.to_body(stream=False)
            )
        )

    def stream_restart_conversation(
        self, conversation_id: str, request: ConversationRequest
    ) -> AsyncGenerator[dict[str, Any], None]:
        return self._stream(
            "POST", f"/conversations/{conversation_id}/restart", json=request.to_body(stream=True)
        )

    async def get_conversation(self, conversation_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/conversations/{conversation_id}")

    async def list_conversations(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        order: Optional[str] = None,
    ) -> ConversationList:
        params = _query(page=page, page_size=page_size, order=order)
        return _parse_conversation_list(await self._request("GET", "/conversations", params=params))

    async def get_conversation_history(self, conversation_id: str) -> ConversationHistory:
        return ConversationHistory(**await self._request("GET", f"/conversations/{conversation_id}/history"))

    async def get_conversation_messages(self, conversation_id: str) -> ConversationMessages:
        return ConversationMessages(**await self._request("GET", f"/conversations/{conversation_id}/messages"))

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
