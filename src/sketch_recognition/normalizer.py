"""Image normalization applied before any recognition call.

All transforms take and return RGBA ``uint8`` arrays of shape
``(height, width, 4)`` and never modify their input in place.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

import cv2
import numpy as np

from .exceptions import DecodeError, TransformError
from .image_utils import decode_image, encode_png
from .types import NormalizeMode

logger = logging.getLogger(__name__)

CONTRAST_FACTOR = 1.2
DEFAULT_SIMPLIFY_THRESHOLD = 200
# Midpoint used when quantizing luminance to one bit.
BINARY_THRESHOLD = 128

Stage = Tuple[str, Callable[[np.ndarray], np.ndarray]]


def _check_image(image: Optional[np.ndarray]) -> None:
    if image is None or image.size == 0:
        raise DecodeError("Source image is missing or empty")
    if image.ndim != 3 or image.shape[2] != 4:
        raise TransformError(f"Expected an RGBA image, got shape {image.shape}")


def resize(image: np.ndarray, target_width: int, target_height: int) -> np.ndarray:
    """Stretch the whole source onto a ``target_width x target_height`` canvas."""

    _check_image(image)
    if target_width < 1 or target_height < 1:
        raise TransformError(f"Invalid target size {target_width}x{target_height}")
    try:
        return cv2.resize(image, (target_width, target_height), interpolation=cv2.INTER_LINEAR)
    except cv2.error as exc:
        raise TransformError(f"Resize failed: {exc}") from exc


def enhance_contrast(image: np.ndarray, factor: float = CONTRAST_FACTOR) -> np.ndarray:
    """Stretch the RGB channels away from mid-gray; alpha is untouched."""

    _check_image(image)
    rgb = image[..., :3].astype(np.float32)
    stretched = np.floor((rgb - 128.0) * factor + 128.0 + 0.5)
    result = image.copy()
    result[..., :3] = np.clip(stretched, 0, 255).astype(np.uint8)
    return result


def convert_to_black_and_white(image: np.ndarray) -> np.ndarray:
    """Quantize luminance to pure black or pure white, keeping alpha."""

    _check_image(image)
    try:
        gray = cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    except cv2.error as exc:
        raise TransformError(f"Grayscale conversion failed: {exc}") from exc
    binary = np.where(gray >= BINARY_THRESHOLD, 255, 0).astype(np.uint8)
    result = np.empty_like(image)
    result[..., 0] = binary
    result[..., 1] = binary
    result[..., 2] = binary
    result[..., 3] = image[..., 3]
    return result


def simplify(image: np.ndarray, threshold: int = DEFAULT_SIMPLIFY_THRESHOLD) -> np.ndarray:
    """Collapse the drawing to an ink/no-ink mask.

    Transparent pixels pass through unchanged. Any other pixel brighter than
    ``threshold`` becomes fully transparent black; the rest become opaque black.
    """

    _check_image(image)
    if not 0 <= threshold <= 255:
        raise TransformError(f"Threshold must be between 0 and 255, got {threshold}")

    brightness = image[..., :3].astype(np.int32).sum(axis=2) // 3
    transparent = image[..., 3] == 0

    result = np.zeros_like(image)
    result[brightness <= threshold] = (0, 0, 0, 255)
    result[transparent] = image[transparent]
    return result


class ImageNormalizer:
    """Runs the preprocessing stages, skipping any stage that fails."""

    def __init__(self, simplify_threshold: int = DEFAULT_SIMPLIFY_THRESHOLD) -> None:
        self.simplify_threshold = simplify_threshold

    def stages(
        self,
        target_width: int,
        target_height: int,
        mode: NormalizeMode = NormalizeMode.PLAIN,
    ) -> List[Stage]:
        """Return the ordered ``(name, transform)`` pairs for ``mode``."""

        stages: List[Stage] = [
            ("resize", lambda image: resize(image, target_width, target_height)),
            ("enhance_contrast", enhance_contrast),
        ]
        if mode is NormalizeMode.FULL_SKETCH:
            stages.append(("black_and_white", convert_to_black_and_white))
            stages.append(("simplify", lambda image: simplify(image, self.simplify_threshold)))
        return stages

    def process(
        self,
        image: np.ndarray,
        target_width: int,
        target_height: int,
        mode: NormalizeMode = NormalizeMode.PLAIN,
    ) -> np.ndarray:
        """Apply the pipeline to a decoded RGBA array."""

        current = image
        for name, transform in self.stages(target_width, target_height, mode):
            try:
                current = transform(current)
            except Exception:
                logger.warning("Preprocessing stage %s failed, keeping previous image", name, exc_info=True)
        return current

    def normalize(
        self,
        image_bytes: bytes,
        target_width: int,
        target_height: int,
        mode: NormalizeMode = NormalizeMode.PLAIN,
    ) -> bytes:
        """Return PNG bytes of the normalized image, or ``image_bytes`` on failure."""

        try:
            image = decode_image(image_bytes)
        except DecodeError as exc:
            logger.warning("Image preprocessing failed, using original image: %s", exc)
            return image_bytes

        logger.debug("Original image size: %dx%d", image.shape[1], image.shape[0])
        processed = self.process(image, target_width, target_height, mode)

        try:
            return encode_png(processed)
        except Exception:
            logger.warning("Encoding normalized image failed, using original image", exc_info=True)
            return image_bytes


def normalize(
    image_bytes: bytes,
    target_width: int,
    target_height: int,
    mode: NormalizeMode = NormalizeMode.PLAIN,
) -> bytes:
    """Module-level shortcut around :meth:`ImageNormalizer.normalize`."""

    return ImageNormalizer().normalize(image_bytes, target_width, target_height, mode)
