from __future__ import annotations

"""
recipe_feature.py

Purpose:
    In-memory recipe feature store used by the content-based recommender.

A RecipeFeature has two weighted maps:
  - tags     : "<category>_<value>" -> weight (1.0 for structured attributes)
  - keywords : keyword -> weight, pre-computed by an external text analyser

Structured attributes arrive as {category: value-or-values}. At the boundary
each value is wrapped as Single(value) or Multiple(values) and immediately
flattened into tag strings, so nothing downstream sees the mixed shapes:

    {"cuisine": "sichuan", "taste": ["spicy", "salty"]}
      -> {"cuisine_sichuan": 1.0, "taste_spicy": 1.0, "taste_salty": 1.0}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from recipe_recommender.logging_utils import get_logger, log_context

logger = get_logger(__name__)

STRUCTURED_TAG_WEIGHT = 1.0


@dataclass(frozen=True)
class Single:
    value: str


@dataclass(frozen=True)
class Multiple:
    values: Tuple[str, ...]


AttributeValue = Union[Single, Multiple]


def as_attribute_value(raw: Any) -> Optional[AttributeValue]:
    """Wrap a raw attribute value; None means "no value" and yields None."""
    if raw is None:
        return None
    if isinstance(raw, (Single, Multiple)):
        return raw
    if isinstance(raw, str):
        return Single(raw)
    if isinstance(raw, (list, tuple, set, frozenset)):
        return Multiple(tuple(str(v) for v in raw if v is not None))
    return Single(str(raw))


def tag_key(category: str, value: str) -> str:
    return f"{category}_{value}"


def attribute_tags(category: str, attr: AttributeValue) -> List[str]:
    if isinstance(attr, Single):
        return [tag_key(category, attr.value)]
    return [tag_key(category, v) for v in attr.values]


@dataclass
class RecipeFeature:
    tags: Dict[str, float] = field(default_factory=dict)
    keywords: Dict[str, float] = field(default_factory=dict)


class RecipeFeatureStore:
    def __init__(self) -> None:
        self._features: Dict[str, RecipeFeature] = {}

    def add_structured_tags(self, recipe_id: str, attributes: Mapping[str, Any]) -> None:
        """Expand {category: value(s)} into weighted tags and merge them in."""
        feature = self._get_or_create(recipe_id)
        for category, raw in attributes.items():
            attr = as_attribute_value(raw)
            if attr is None:
                continue
            for tag in attribute_tags(category, attr):
                feature.tags[tag] = STRUCTURED_TAG_WEIGHT

    def set_keywords(self, recipe_id: str, keyword_weights: Mapping[str, float]) -> None:
        """Merge keyword weights; an existing keyword is overwritten, not summed."""
        feature = self._get_or_create(recipe_id)
        feature.keywords.update({k: float(w) for k, w in keyword_weights.items()})

    def extract_nlp_keywords(self, recipe_id: str, text: str, keywords: Mapping[str, float]) -> None:
        """
        Store keywords already extracted from `text` by an external analyser.

        The text itself is not analysed here; it is only logged for provenance.
        """
        logger.debug(
            "Storing %d keywords for recipe=%s (text length %d)",
            len(keywords),
            recipe_id,
            len(text or ""),
            extra=log_context(
                "extract_nlp_keywords",
                "Attach externally extracted keywords to a recipe",
                next_step="Merge into keyword map",
            ),
        )
        self.set_keywords(recipe_id, keywords)

    def get_feature(self, recipe_id: str) -> RecipeFeature:
        return self._features.get(recipe_id) or RecipeFeature()

    # Alias under the legacy API name
    get_recipe_feature_vector = get_feature

    def list_recipe_ids(self) -> List[str]:
        return list(self._features.keys())

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._features

    def __len__(self) -> int:
        return len(self._features)

    def _get_or_create(self, recipe_id: str) -> RecipeFeature:
        feature = self._features.get(recipe_id)
        if feature is None:
            feature = RecipeFeature()
            self._features[recipe_id] = feature
        return feature
