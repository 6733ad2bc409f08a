"""Public exports for the sketch recognition package."""

from .config import Settings, load_settings
from .normalizer import ImageNormalizer, normalize
from .recognizers import MockRecognizer, Recognizer, SketchRecognizer, build_recognizer
from .service import RecognitionService
from .types import Alternative, NormalizeMode, RecognitionResult

__all__ = [
    "Alternative",
    "ImageNormalizer",
    "MockRecognizer",
    "NormalizeMode",
    "RecognitionResult",
    "RecognitionService",
    "Recognizer",
    "Settings",
    "SketchRecognizer",
    "build_recognizer",
    "load_settings",
    "normalize",
]
