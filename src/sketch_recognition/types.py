"""Common types used throughout the recognition pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class NormalizeMode(str, Enum):
    """Preprocessing variants supported by the image normalizer."""

    PLAIN = "plain"
    FULL_SKETCH = "full_sketch"


@dataclass(frozen=True)
class Alternative:
    """A secondary, lower-confidence guess."""

    name: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score}


@dataclass(frozen=True)
class RecognitionResult:
    """Outcome of a single recognition request.

    ``confidence`` is an integer percentage. ``alternatives`` keep the order in
    which the recognizer produced them, which is not necessarily sorted by
    score.
    """

    success: bool
    prediction: Optional[str] = None
    confidence: int = 0
    category: Optional[str] = None
    alternatives: Tuple[Alternative, ...] = ()
    error: Any = None
    message: Optional[str] = None
    mock: bool = False
    sketch_recognition: bool = False

    @classmethod
    def failure(cls, message: str, error: Any = None) -> "RecognitionResult":
        return cls(success=False, message=message, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Render the result in the shape calling layers put on the wire."""

        payload: Dict[str, Any] = {"success": self.success}
        if self.success:
            payload["prediction"] = self.prediction
            payload["confidence"] = self.confidence
        if self.category is not None:
            payload["category"] = self.category
        if self.alternatives:
            payload["alternatives"] = [alt.to_dict() for alt in self.alternatives]
        if self.error is not None:
            payload["error"] = self.error
        if self.message is not None:
            payload["message"] = self.message
        if self.mock:
            payload["mock"] = True
        if self.sketch_recognition:
            payload["sketch_recognition"] = True
        return payload
