"""Base recognizer definitions."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from ..types import Alternative, RecognitionResult

MIN_ALTERNATIVE_CONFIDENCE = 20


class Recognizer(ABC):
    """Abstract base class for anything that guesses what a drawing depicts."""

    name: str = "recognizer"

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> RecognitionResult:
        """Return a recognition result for the encoded image."""


class HeuristicRecognizer(Recognizer):
    """Shared plumbing for recognizers that synthesize results at random."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        delay_range: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.rng = rng or random.Random()
        self.delay_range = delay_range

    def _simulate_delay(self) -> None:
        low, high = self.delay_range
        if high <= 0:
            return
        # Kept off self.rng so a seeded sequence does not depend on the delay.
        time.sleep(random.uniform(max(0.0, low), high))

    def _pick_alternatives(
        self, candidates: Sequence[str], base_confidence: int, count: int
    ) -> List[Alternative]:
        """Draw up to ``count`` distinct candidates, scored below ``base_confidence``."""

        picked = self.rng.sample(list(candidates), min(count, len(candidates)))
        alternatives = []
        for name in picked:
            score = max(MIN_ALTERNATIVE_CONFIDENCE, base_confidence - 5 - self.rng.randrange(15))
            alternatives.append(Alternative(name=name, score=score / 100.0))
        return alternatives
