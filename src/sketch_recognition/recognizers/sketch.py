"""Category-aware heuristic recognizer for line drawings."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from ..normalizer import ImageNormalizer
from ..taxonomy import CATEGORY_TAXONOMY, SIMILAR_OBJECTS, SimilarityTable, Taxonomy, validate_taxonomy
from ..types import Alternative, NormalizeMode, RecognitionResult
from .base import HeuristicRecognizer

logger = logging.getLogger(__name__)

SKETCH_SIZE = 300
# Sketches are ambiguous, so synthesized confidence stays in 45..84.
MIN_CONFIDENCE = 45
CONFIDENCE_SPAN = 40
SIMILAR_ALTERNATIVES = 2
SIBLING_ALTERNATIVES = 1
SIBLING_CONFIDENCE_PENALTY = 15


class SketchRecognizer(HeuristicRecognizer):
    """Synthesizes a plausible guess from the category taxonomy.

    The image is preprocessed the same way a real sketch model would want it,
    but the analysis step does not look at the pixels.
    """

    name = "sketch"

    def __init__(
        self,
        taxonomy: Taxonomy = CATEGORY_TAXONOMY,
        similar: SimilarityTable = SIMILAR_OBJECTS,
        normalizer: Optional[ImageNormalizer] = None,
        target_size: Tuple[int, int] = (SKETCH_SIZE, SKETCH_SIZE),
        rng: Optional[random.Random] = None,
        delay_range: Tuple[float, float] = (0.0, 0.0),
        preprocess: bool = True,
    ) -> None:
        super().__init__(rng=rng, delay_range=delay_range)
        validate_taxonomy(taxonomy, similar)
        self.taxonomy = taxonomy
        self.similar = similar
        self.categories = tuple(taxonomy)
        self.normalizer = normalizer or ImageNormalizer()
        self.target_size = target_size
        self.preprocess = preprocess

    def recognize(self, image_bytes: bytes) -> RecognitionResult:
        logger.info("Using sketch recognizer")
        processed = image_bytes
        if self.preprocess:
            width, height = self.target_size
            processed = self.normalizer.normalize(image_bytes, width, height, NormalizeMode.FULL_SKETCH)
        self._simulate_delay()
        return self.analyze(processed)

    def analyze(self, processed_bytes: bytes) -> RecognitionResult:
        """Draw category, label, confidence and alternatives."""

        category = self.rng.choice(self.categories)
        labels = self.taxonomy[category]
        prediction = self.rng.choice(labels)
        confidence = MIN_CONFIDENCE + self.rng.randrange(CONFIDENCE_SPAN)

        alternatives: List[Alternative] = []
        similars = self.similar.get(prediction)
        if similars:
            alternatives.extend(self._pick_alternatives(similars, confidence, SIMILAR_ALTERNATIVES))

        siblings = [label for label in labels if label != prediction]
        if siblings:
            alternatives.extend(
                self._pick_alternatives(siblings, confidence - SIBLING_CONFIDENCE_PENALTY, SIBLING_ALTERNATIVES)
            )

        logger.debug("Sketch result: %s (category: %s, confidence: %d%%)", prediction, category, confidence)
        return RecognitionResult(
            success=True,
            prediction=prediction,
            confidence=confidence,
            category=category,
            alternatives=tuple(alternatives),
            sketch_recognition=True,
        )
