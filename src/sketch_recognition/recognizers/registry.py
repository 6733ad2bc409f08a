"""Selects the active recognizer from configuration."""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from ..config import Settings
from ..exceptions import ConfigurationError
from ..normalizer import ImageNormalizer
from ..taxonomy import CATEGORY_TAXONOMY, SIMILAR_OBJECTS, flat_labels, load_taxonomy
from .baidu import BaiduRecognizer
from .base import Recognizer
from .doubao import DoubaoRecognizer
from .mock import MockRecognizer
from .sketch import SketchRecognizer

RecognizerFactory = Callable[[Settings, random.Random], Recognizer]


def _tables(settings: Settings):
    if settings.taxonomy_path:
        return load_taxonomy(settings.taxonomy_path)
    return CATEGORY_TAXONOMY, SIMILAR_OBJECTS


def _build_sketch(settings: Settings, rng: random.Random) -> Recognizer:
    taxonomy, similar = _tables(settings)
    return SketchRecognizer(
        taxonomy=taxonomy,
        similar=similar,
        normalizer=ImageNormalizer(settings.simplify_threshold),
        target_size=settings.sketch_size,
        rng=rng,
        delay_range=settings.delay_range,
    )


def _build_mock(settings: Settings, rng: random.Random) -> Recognizer:
    taxonomy, similar = _tables(settings)
    return MockRecognizer(labels=flat_labels(taxonomy), similar=similar, rng=rng, delay_range=settings.delay_range)


def _build_baidu(settings: Settings, rng: random.Random) -> Recognizer:
    return BaiduRecognizer(settings.baidu, fallback=_build_sketch(settings, rng))


def _build_doubao(settings: Settings, rng: random.Random) -> Recognizer:
    return DoubaoRecognizer(settings.doubao, fallback=_build_sketch(settings, rng))


_REGISTRY: Dict[str, RecognizerFactory] = {
    "sketch": _build_sketch,
    "mock": _build_mock,
    "baidu": _build_baidu,
    "doubao": _build_doubao,
}


def available_backends() -> List[str]:
    return sorted(_REGISTRY)


def build_recognizer(settings: Settings, rng: Optional[random.Random] = None) -> Recognizer:
    """Construct the recognizer named by ``settings.backend``."""

    factory = _REGISTRY.get(settings.backend)
    if factory is None:
        raise ConfigurationError(
            f"Unknown recognition backend {settings.backend!r}; expected one of {available_backends()}"
        )
    if rng is None:
        rng = random.Random(settings.seed)
    return factory(settings, rng)
