"""Utility helpers for image loading, decoding and encoding."""

from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

from .exceptions import DecodeError

ImageInput = Union[str, Path, bytes, np.ndarray, Image.Image]


def load_image_bytes(image_input: ImageInput) -> bytes:
    """Turn any supported image input into encoded image bytes.

    Arrays follow the OpenCV convention (BGR, BGRA or single channel).
    """

    if isinstance(image_input, (bytes, bytearray)):
        return bytes(image_input)
    if isinstance(image_input, np.ndarray):
        ok, buffer = cv2.imencode(".png", image_input)
        if not ok:
            raise ValueError("Unable to encode ndarray input as PNG")
        return buffer.tobytes()
    if isinstance(image_input, Image.Image):
        output = io.BytesIO()
        image_input.save(output, format="PNG")
        return output.getvalue()

    path = Path(image_input)
    if not path.exists():
        raise FileNotFoundError(f"Image path not found: {path}")
    return path.read_bytes()


def decode_base64_image(data: str) -> bytes:
    """Decode plain base64 text or a ``data:image/...;base64,`` URL."""

    if data.startswith("data:"):
        _, _, data = data.partition(",")
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 image data: {exc}") from exc


def encode_base64_image(image_bytes: bytes) -> str:
    return base64.b64encode(image_bytes).decode("ascii")


def decode_image(image_bytes: bytes) -> np.ndarray:
    """Decode encoded image bytes into an RGBA ``uint8`` array."""

    if not image_bytes:
        raise DecodeError("Empty image data provided")
    raw = np.frombuffer(image_bytes, dtype=np.uint8)
    try:
        image = cv2.imdecode(raw, cv2.IMREAD_UNCHANGED)
    except cv2.error as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc
    if image is None:
        raise DecodeError("Input data does not appear to be a valid image format")
    return bgr_to_rgba(image)


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGBA array as PNG bytes."""

    ok, buffer = cv2.imencode(".png", cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise ValueError("Unable to encode image as PNG")
    return buffer.tobytes()


def bgr_to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-decoded array to four-channel RGBA."""

    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF input
        image = (image / 257).astype(np.uint8)
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)

