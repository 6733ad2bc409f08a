"""Tests for the Doubao chat-completions adapter with a fake HTTP session."""

from __future__ import annotations

import base64
import random
from typing import Any, Dict, List

import pytest
import requests

from sketch_recognition.config import DoubaoSettings
from sketch_recognition.image_utils import decode_image
from sketch_recognition.recognizers import DoubaoRecognizer, MockRecognizer
from sketch_recognition.recognizers.doubao import parse_chat_response

from . import image_factory as factory
from .test_baidu import FakeResponse

DATA_URL_PREFIX = "data:image/png;base64,"


class FakeChatSession:
    """Records chat posts and replays a single canned response."""

    def __init__(self, response: Any) -> None:
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, headers: dict = None, json: dict = None, timeout: float = None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _chat_body(content: Any) -> Dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _settings(enabled: bool = True, api_key: str = "ark-key") -> DoubaoSettings:
    return DoubaoSettings(enabled=enabled, api_key=api_key, model="vision-model", timeout=5)


@pytest.fixture(scope="module")
def sketch_png() -> bytes:
    return factory.to_png(factory.create_sketch_image())


@pytest.mark.parametrize("settings", [_settings(enabled=False), _settings(api_key="")])
def test_disabled_adapter_uses_fallback(sketch_png, settings):
    session = FakeChatSession(FakeResponse(_chat_body("cat")))
    recognizer = DoubaoRecognizer(settings, fallback=MockRecognizer(rng=random.Random(1)), session=session)
    result = recognizer.recognize(sketch_png)
    assert result.success and result.mock
    assert session.calls == []


def test_disabled_adapter_without_fallback_fails(sketch_png):
    result = DoubaoRecognizer(_settings(enabled=False), session=FakeChatSession(None)).recognize(sketch_png)
    assert not result.success
    assert "disabled" in result.message


def test_chat_request_carries_image_and_sampling_options(sketch_png):
    session = FakeChatSession(FakeResponse(_chat_body("Cat。\nIt has whiskers.")))
    result = DoubaoRecognizer(_settings(), session=session).recognize(sketch_png)

    assert result.success
    assert result.prediction == "Cat"
    assert result.confidence == 85
    assert result.alternatives == ()

    (call,) = session.calls
    assert call["url"] == DoubaoSettings.url
    assert call["headers"]["Authorization"] == "Bearer ark-key"
    assert call["timeout"] == 5
    payload = call["json"]
    assert payload["model"] == "vision-model"
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 50
    text_part, image_part = payload["messages"][0]["content"]
    assert text_part["type"] == "text"
    url = image_part["image_url"]["url"]
    assert url.startswith(DATA_URL_PREFIX)
    sent = decode_image(base64.b64decode(url[len(DATA_URL_PREFIX):]))
    assert sent.shape == (300, 300, 4)


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({}, status_code=500),
        requests.exceptions.ConnectionError("offline"),
        requests.exceptions.Timeout("slow"),
    ],
)
def test_remote_failures_fall_back(sketch_png, response):
    recognizer = DoubaoRecognizer(
        _settings(), fallback=MockRecognizer(rng=random.Random(2)), session=FakeChatSession(response)
    )
    result = recognizer.recognize(sketch_png)
    assert result.success and result.mock


def test_remote_failure_without_fallback_is_reported(sketch_png):
    session = FakeChatSession(requests.exceptions.ConnectionError("offline"))
    result = DoubaoRecognizer(_settings(), session=session).recognize(sketch_png)
    assert not result.success
    assert "offline" in result.message


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("A bicycle!", "A bicycle"),
        ("  house,  \nsecond line", "house"),
        ("猫。", "猫"),
    ],
)
def test_first_line_is_taken_without_punctuation(content, expected):
    result = parse_chat_response(_chat_body(content))
    assert (result.prediction, result.confidence) == (expected, 85)


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {}}]},
        _chat_body(None),
        _chat_body("..."),
        "not a dict",
    ],
)
def test_unusable_reply_gives_unknown_object(body):
    result = parse_chat_response(body)
    assert result.success
    assert (result.prediction, result.confidence) == ("unknown object", 0)
    assert result.error == body
