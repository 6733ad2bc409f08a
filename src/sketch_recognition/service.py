"""High level API that turns caller inputs into recognition results."""

from __future__ import annotations

import logging
from typing import Optional

from .config import Settings
from .image_utils import ImageInput, decode_base64_image, load_image_bytes
from .normalizer import ImageNormalizer
from .recognizers import Recognizer, build_recognizer
from .types import NormalizeMode, RecognitionResult

logger = logging.getLogger(__name__)


class RecognitionService:
    """Runs the configured recognizer.

    Recognition never raises: failures come back as unsuccessful results.
    ``normalize`` only raises when the input itself cannot be loaded.
    """

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.recognizer = recognizer or build_recognizer(self.settings)
        self.normalizer = ImageNormalizer(self.settings.simplify_threshold)

    def recognize(self, image_input: ImageInput) -> RecognitionResult:
        """Return a recognition result for a path, bytes, array or PIL image."""

        try:
            image_bytes = load_image_bytes(image_input)
            return self.recognizer.recognize(image_bytes)
        except Exception as exc:
            logger.error("Error during image recognition", exc_info=True)
            return RecognitionResult.failure(f"recognition failed: {exc}")

    def recognize_base64(self, data: str) -> RecognitionResult:
        """Decode base64 text (or a data URL) and recognize it."""

        try:
            image_bytes = decode_base64_image(data)
        except ValueError as exc:
            logger.warning("Rejected base64 payload: %s", exc)
            return RecognitionResult.failure(f"recognition failed: {exc}")
        return self.recognize(image_bytes)

    def normalize(
        self,
        image_input: ImageInput,
        target_width: int,
        target_height: int,
        mode: NormalizeMode = NormalizeMode.PLAIN,
    ) -> bytes:
        """Preprocess an image input and return PNG bytes.

        Raises ``FileNotFoundError`` for a missing path; any later failure
        returns the loaded bytes unchanged.
        """

        return self.normalizer.normalize(load_image_bytes(image_input), target_width, target_height, mode)

    @property
    def backend(self) -> str:
        return self.recognizer.name
