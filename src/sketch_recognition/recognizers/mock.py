"""Flat mock recognizer used as the simplest fallback."""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Tuple

from ..taxonomy import CATEGORY_TAXONOMY, SIMILAR_OBJECTS, SimilarityTable, flat_labels
from ..types import RecognitionResult
from .base import HeuristicRecognizer

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 50
CONFIDENCE_SPAN = 40
SIMILAR_ALTERNATIVES = 2


class MockRecognizer(HeuristicRecognizer):
    """Picks any label from one flat list, ignoring the image entirely."""

    name = "mock"

    def __init__(
        self,
        labels: Optional[Sequence[str]] = None,
        similar: SimilarityTable = SIMILAR_OBJECTS,
        rng: Optional[random.Random] = None,
        delay_range: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        super().__init__(rng=rng, delay_range=delay_range)
        self.labels = tuple(labels) if labels is not None else flat_labels(CATEGORY_TAXONOMY)
        if not self.labels:
            raise ValueError("MockRecognizer needs at least one label")
        self.similar = similar

    def recognize(self, image_bytes: bytes) -> RecognitionResult:
        logger.info("Using mock sketch recognizer")
        self._simulate_delay()

        prediction = self.rng.choice(self.labels)
        confidence = MIN_CONFIDENCE + self.rng.randrange(CONFIDENCE_SPAN)
        similars = self.similar.get(prediction) or ()
        alternatives = self._pick_alternatives(similars, confidence, SIMILAR_ALTERNATIVES)

        logger.debug("Mock result: %s (confidence: %d%%)", prediction, confidence)
        return RecognitionResult(
            success=True,
            prediction=prediction,
            confidence=confidence,
            alternatives=tuple(alternatives),
            mock=True,
            sketch_recognition=True,
        )
