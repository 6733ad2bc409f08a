"""Adapter for the Baidu AI image recognition APIs."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import BaiduSettings
from ..exceptions import RemoteServiceError
from ..image_utils import encode_base64_image
from ..normalizer import ImageNormalizer
from ..types import Alternative, NormalizeMode, RecognitionResult
from .base import Recognizer

logger = logging.getLogger(__name__)

TOKEN_URL = "https://aip.baidubce.com/oauth/2.0/token"
ENDPOINTS = {
    "animal": "https://aip.baidubce.com/rest/2.0/image-classify/v1/animal",
    "handwriting": "https://aip.baidubce.com/rest/2.0/ocr/v1/handwriting",
}
# Handwriting must stay under the API's size limit, animal uses the sketch size.
TARGET_SIZES = {
    "animal": (300, 300),
    "handwriting": (500, 500),
}
HANDWRITING_CONFIDENCE = 85


class BaiduRecognizer(Recognizer):
    """Forwards preprocessed drawings to Baidu, falling back when unavailable."""

    name = "baidu"

    def __init__(
        self,
        settings: BaiduSettings,
        fallback: Optional[Recognizer] = None,
        normalizer: Optional[ImageNormalizer] = None,
        session: Any = None,
    ) -> None:
        if settings.endpoint not in ENDPOINTS:
            raise ValueError(f"Unknown Baidu endpoint: {settings.endpoint}")
        self.settings = settings
        self.fallback = fallback
        self.normalizer = normalizer or ImageNormalizer()
        self.session = session or requests.Session()

    def recognize(self, image_bytes: bytes) -> RecognitionResult:
        if not self.settings.enabled or not self.settings.has_credentials:
            logger.warning("Baidu recognition is disabled, using fallback recognizer")
            return self._fallback(image_bytes, "Baidu recognition is disabled")

        width, height = TARGET_SIZES[self.settings.endpoint]
        processed = self.normalizer.normalize(image_bytes, width, height, NormalizeMode.PLAIN)

        try:
            token = self.get_access_token()
            response = self.session.post(
                ENDPOINTS[self.settings.endpoint],
                params={"access_token": token},
                data=self._form(processed),
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            body = response.json()
            logger.debug("Baidu raw response: %s", body)
            if self.settings.endpoint == "handwriting":
                return parse_handwriting_response(body)
            return parse_animal_response(body)
        except (
            requests.exceptions.RequestException,
            RemoteServiceError,
            ValueError,
            TypeError,
            KeyError,
            AttributeError,
        ) as exc:
            logger.error("Baidu recognition failed", exc_info=True)
            return self._fallback(image_bytes, f"Recognition failed: {exc}")

    def get_access_token(self) -> str:
        """Exchange the API key pair for an OAuth access token."""

        response = self.session.post(
            TOKEN_URL,
            data={
                "grant_type": "client_credentials",
                "client_id": self.settings.api_key,
                "client_secret": self.settings.secret_key,
            },
            timeout=self.settings.timeout,
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict) or "access_token" not in body:
            raise RemoteServiceError("Failed to obtain Baidu access token")
        return body["access_token"]

    def _form(self, image_bytes: bytes) -> Dict[str, str]:
        form = {"image": encode_base64_image(image_bytes)}
        if self.settings.endpoint == "animal":
            form["baike_num"] = "0"
        return form

    def _fallback(self, image_bytes: bytes, message: str) -> RecognitionResult:
        if self.fallback is None:
            return RecognitionResult.failure(message)
        return self.fallback.recognize(image_bytes)


def parse_animal_response(body: Dict[str, Any]) -> RecognitionResult:
    """Map an animal-classification response onto a result."""

    items = body.get("result") if isinstance(body, dict) else None
    if not isinstance(items, list):
        return RecognitionResult(success=True, prediction="recognition failed", confidence=0, error=body)
    if not items:
        return RecognitionResult(success=True, prediction="unknown animal", confidence=0)

    alternatives: List[Alternative] = []
    for item in items:
        alternatives.append(Alternative(name=str(item.get("name", "")), score=float(item.get("score", 0))))
    top = alternatives[0]
    return RecognitionResult(
        success=True,
        prediction=top.name,
        confidence=int(top.score * 100),
        alternatives=tuple(alternatives),
    )


def parse_handwriting_response(body: Dict[str, Any]) -> RecognitionResult:
    """Map a handwriting OCR response onto a result."""

    items = body.get("words_result") if isinstance(body, dict) else None
    if not isinstance(items, list):
        if isinstance(body, dict) and "error_code" in body:
            logger.error("Baidu API error: code=%s, msg=%s", body.get("error_code"), body.get("error_msg"))
            prediction = "recognition service unavailable"
        else:
            # Blank canvas or an image the OCR cannot read at all.
            prediction = "unrecognizable, try drawing more clearly"
        return RecognitionResult(success=True, prediction=prediction, confidence=0, error=body)
    if not items:
        return RecognitionResult(success=True, prediction="no content recognized", confidence=0)

    words = [str(item["words"]) for item in items if "words" in item]
    return RecognitionResult(
        success=True,
        prediction=", ".join(words),
        confidence=HANDWRITING_CONFIDENCE,
        alternatives=tuple(Alternative(name=word, score=HANDWRITING_CONFIDENCE / 100.0) for word in words),
    )
