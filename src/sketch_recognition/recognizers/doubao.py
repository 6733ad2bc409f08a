"""Adapter for the Doubao multimodal chat-completions API."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import requests

from ..config import DoubaoSettings
from ..image_utils import encode_base64_image
from ..normalizer import ImageNormalizer
from ..types import NormalizeMode, RecognitionResult
from .base import Recognizer

logger = logging.getLogger(__name__)

TARGET_SIZE = (300, 300)
GUESS_CONFIDENCE = 85
PROMPT = (
    "What is this drawing? Answer with a single word naming what you think it shows, "
    "without any explanation."
)
_PUNCTUATION = re.compile(r"[，。！？,.!?]")


class DoubaoRecognizer(Recognizer):
    """Asks a vision-capable chat model to name the drawing."""

    name = "doubao"

    def __init__(
        self,
        settings: DoubaoSettings,
        fallback: Optional[Recognizer] = None,
        normalizer: Optional[ImageNormalizer] = None,
        session: Any = None,
    ) -> None:
        self.settings = settings
        self.fallback = fallback
        self.normalizer = normalizer or ImageNormalizer()
        self.session = session or requests.Session()

    def recognize(self, image_bytes: bytes) -> RecognitionResult:
        if not self.settings.enabled or not self.settings.api_key:
            logger.warning("Doubao recognition is disabled, using fallback recognizer")
            return self._fallback(image_bytes, "Doubao recognition is disabled")

        width, height = TARGET_SIZE
        processed = self.normalizer.normalize(image_bytes, width, height, NormalizeMode.PLAIN)

        try:
            response = self.session.post(
                self.settings.url,
                headers={
                    "Authorization": f"Bearer {self.settings.api_key}",
                    "Volc-Access-Key": self.settings.api_key,
                },
                json=self.build_request(processed),
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            body = response.json()
            logger.debug("Doubao raw response: %s", body)
            return parse_chat_response(body)
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.error("Doubao recognition failed", exc_info=True)
            return self._fallback(image_bytes, f"Recognition failed: {exc}")

    def build_request(self, image_bytes: bytes) -> Dict[str, Any]:
        """Chat-completions payload carrying the prompt and the image as a data URL."""

        return {
            "model": self.settings.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": "data:image/png;base64," + encode_base64_image(image_bytes)},
                        },
                    ],
                }
            ],
            "temperature": 0.3,
            "max_tokens": 50,
        }

    def _fallback(self, image_bytes: bytes, message: str) -> RecognitionResult:
        if self.fallback is None:
            return RecognitionResult.failure(message)
        return self.fallback.recognize(image_bytes)


def parse_chat_response(body: Any) -> RecognitionResult:
    """Take the first line of the model's reply, without punctuation, as the guess."""

    try:
        content = body["choices"][0]["message"]["content"]
    except (TypeError, KeyError, IndexError):
        content = None

    if isinstance(content, str):
        guess = _PUNCTUATION.sub("", content.split("\n")[0]).strip()
        if guess:
            logger.info("Doubao guess: %s", guess)
            return RecognitionResult(success=True, prediction=guess, confidence=GUESS_CONFIDENCE)

    logger.warning("No usable content in Doubao response: %s", body)
    return RecognitionResult(success=True, prediction="unknown object", confidence=0, error=body)
