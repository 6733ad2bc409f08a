"""Static label tables driving synthesized sketch predictions."""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple, Union

from .exceptions import ConfigurationError

Taxonomy = Mapping[str, Tuple[str, ...]]
SimilarityTable = Mapping[str, Tuple[str, ...]]


def _freeze(table: Mapping[str, Sequence[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


CATEGORY_TAXONOMY: Taxonomy = _freeze(
    {
        "animals": (
            "cat", "dog", "tiger", "lion", "elephant", "giraffe", "zebra", "panda",
            "monkey", "rabbit", "deer", "fish", "bird", "eagle", "duck", "goose",
            "snake", "turtle", "frog", "butterfly",
        ),
        "objects": (
            "house", "tree", "flower", "sun", "moon", "star", "cloud", "rain",
            "umbrella", "car", "bicycle", "airplane", "boat", "train",
            "apple", "banana", "orange", "watermelon", "strawberry",
            "chair", "table", "television", "computer", "phone",
        ),
        "geometric-shapes": (
            "circle", "square", "triangle", "rectangle", "pentagram", "heart",
        ),
    }
)

# Objects a simple line drawing of the key is easily mistaken for.
SIMILAR_OBJECTS: SimilarityTable = _freeze(
    {
        "cat": ("dog", "tiger", "rabbit"),
        "dog": ("cat", "wolf", "fox"),
        "bird": ("duck", "goose", "eagle"),
        "circle": ("sun", "apple", "orange", "ball"),
        "rectangle": ("square", "house", "television"),
        "triangle": ("mountain", "tent"),
        "star": ("pentagram", "flower"),
        "tree": ("flower", "grass"),
        "car": ("bus", "truck"),
    }
)


def flat_labels(taxonomy: Taxonomy = CATEGORY_TAXONOMY) -> Tuple[str, ...]:
    """All labels of ``taxonomy`` in category order."""

    return tuple(label for labels in taxonomy.values() for label in labels)


def validate_taxonomy(taxonomy: Mapping[str, Sequence[str]], similar: Mapping[str, Sequence[str]]) -> None:
    """Raise :class:`ConfigurationError` if the tables cannot drive predictions."""

    if not taxonomy:
        raise ConfigurationError("Category taxonomy is empty")
    for category, labels in taxonomy.items():
        if not isinstance(category, str) or not category:
            raise ConfigurationError(f"Invalid category name: {category!r}")
        if isinstance(labels, str) or not labels:
            raise ConfigurationError(f"Category {category!r} must list at least one label")
        if not all(isinstance(label, str) and label for label in labels):
            raise ConfigurationError(f"Category {category!r} contains a non-string label")
    for label, confusables in similar.items():
        if isinstance(confusables, str) or not all(isinstance(item, str) and item for item in confusables):
            raise ConfigurationError(f"Similar objects for {label!r} must be a list of strings")


def load_taxonomy(path: Union[str, Path]) -> Tuple[Taxonomy, SimilarityTable]:
    """Load ``{"categories": {...}, "similar": {...}}`` from a JSON file."""

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Unable to load taxonomy from {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Taxonomy file {path} must contain a JSON object")
    categories = data.get("categories") or {}
    similar = data.get("similar") or {}
    if not isinstance(categories, dict) or not isinstance(similar, dict):
        raise ConfigurationError(f"Taxonomy file {path} has malformed sections")

    validate_taxonomy(categories, similar)
    return _freeze(categories), _freeze(similar)
