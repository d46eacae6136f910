"""Tests for Mistral models."""

import pytest

from mistral_client.models import (
    ChatCompletionRequest,
    ConversationRequest,
    ErrorDetail,
    Model,
    ModerationResult,
    OCRDocument,
    OCRRequest,
    SimpleChatResponse,
    StreamedChatCompletionResponse,
    TranscriptionFormat,
    TranscriptionRequest,
    TranscriptionResponse,
    TranscriptionSegment,
    Usage,
)


def test_usage_defaults():
    u = Usage()
    assert u.prompt_tokens == 0
    assert u.total_tokens == 0


def test_streamed_chunk_defaults():
    c = StreamedChatCompletionResponse(id="1", model="m", choices=[{"delta": {}}])
    assert c.choices[0].index == 0
    assert c.choices[0].delta.content is None
    assert c.choices[0].finish_reason is None
    assert c.usage is None


def test_streamed_chunk_tool_calls():
    c = StreamedChatCompletionResponse(
        id="1",
        model="m",
        choices=[{
            "index": 0,
            "delta": {"tool_calls": [{"id": "t1", "function": {"name": "lookup", "arguments": "{}"}}]},
            "finish_reason": "tool_calls",
        }],
    )
    assert c.choices[0].delta.tool_calls[0].function.name == "lookup"


def test_chat_request_serialization():
    r = ChatCompletionRequest(model=Model.SMALL, messages=[{"role": "user", "content": "hi"}], stop=["\n4."])
    d = r.to_body()
    assert d == {
        "model": "mistral-small-latest",
        "messages": [{"role": "user", "content": "hi"}],
        "stream": False,
        "stop": ["\n4."],
    }


def test_chat_request_forbids_unknown_fields():
    with pytest.raises(ValueError):
        ChatCompletionRequest(model="m", messages=[], bogus=1)


def test_moderation_flagged_explicit_wins():
    r = ModerationResult(categories={"pii": True}, flagged=False)
    assert r.is_flagged() is False


def test_moderation_flagged_from_categories():
    assert ModerationResult(categories={"law": True}).is_flagged()
    assert not ModerationResult().is_flagged()


def test_transcription_full_text():
    assert TranscriptionResponse(text="hi").full_text() == "hi"
    assert TranscriptionResponse().full_text() is None
    assert TranscriptionResponse(segments=[]).full_text() is None
    segs = [TranscriptionSegment(start=0, end=1, text="a"), TranscriptionSegment(start=1, end=2, text="b")]
    assert TranscriptionResponse(segments=segs).full_text() == "a b"


def test_simple_chat_content_as_json():
    r = SimpleChatResponse(
        id="1", object="chat.completion", created=0, model="m", role="assistant", content='{"k": [1]}'
    )
    assert r.content_as_json() == {"k": [1]}


def test_conversation_request_body():
    r = ConversationRequest(inputs=[{"role": "user", "content": "hi"}], agent_id="ag_1")
    assert r.to_body(stream=True) == {
        "inputs": [{"role": "user", "content": "hi"}],
        "agent_id": "ag_1",
        "stream": True,
    }


def test_json_mode_models():
    assert Model.LARGE.value in Model.with_json_mode_support()
    assert Model.EMBED.value not in Model.with_json_mode_support()


def test_transcription_request_form():
    r = TranscriptionRequest(
        model=Model.VOXTRAL_SMALL,
        stream=True,
        response_format=TranscriptionFormat.VERBOSE_JSON,
        temperature=0.0,
        timestamp_granularities=["segment", "word"],
    )
    assert r.to_form() == {
        "model": "voxtral-small-latest",
        "stream": "true",
        "response_format": "verbose_json",
        "temperature": "0.0",
        "timestamp_granularities": ["segment", "word"],
    }


def test_transcription_request_omits_defaults():
    assert TranscriptionRequest(model="voxtral-mini-latest", timestamp_granularities=[]).to_form() == {
        "model": "voxtral-mini-latest",
    }


def test_ocr_document_from_base64_picks_type_by_mime():
    pdf = OCRDocument.from_base64("JVBERi0=", "application/pdf")
    assert pdf.to_body() == {"type": "document_url", "document_url": "data:application/pdf;base64,JVBERi0="}
    jpeg = OCRDocument.from_base64("/9j/4AAQ", "image/jpeg")
    assert jpeg.to_body() == {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,/9j/4AAQ"}}


def test_ocr_request_body():
    r = OCRRequest(model=Model.OCR, document=OCRDocument.from_image_url("https://example.com/a.png"))
    assert r.to_body() == {
        "model": "mistral-ocr-latest",
        "document": {"type": "image_url", "image_url": {"url": "https://example.com/a.png"}},
    }


def test_error_detail_accepts_structured_fields():
    d = ErrorDetail.model_validate({"message": {"detail": []}, "code": 1.5, "param": ["a"], "object": "error"})
    assert d.message == {"detail": []}
    assert d.code == 1.5
    assert d.model_extra["object"] == "error"
