"""Recognizer exports."""

from .baidu import BaiduRecognizer
from .base import HeuristicRecognizer, Recognizer
from .doubao import DoubaoRecognizer
from .mock import MockRecognizer
from .registry import available_backends, build_recognizer
from .sketch import SketchRecognizer

__all__ = [
    "Recognizer",
    "HeuristicRecognizer",
    "SketchRecognizer",
    "MockRecognizer",
    "BaiduRecognizer",
    "DoubaoRecognizer",
    "available_backends",
    "build_recognizer",
]
