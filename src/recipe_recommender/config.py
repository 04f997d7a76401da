"""
config.py

Purpose:
    Provide get_settings() which returns the recommender's tunable knobs
    (hybrid weights, cold-start override, neighbourhood size, oversampling,
    similarity epsilon) read from environment variables.

Usage:
    from recipe_recommender.config import get_settings, DEFAULT_BEHAVIOR_WEIGHTS

Environment variables (all optional, .env is honoured):
    RECSYS_HYBRID_WEIGHTS      "0.4,0.3,0.3"   content,user_cf,item_cf
    RECSYS_NEW_USER_WEIGHTS    "0.8,0.1,0.1"   weights used for new users
    RECSYS_K_NEIGHBORS         "20"
    RECSYS_OVERSAMPLE          "2"
    RECSYS_SIMILARITY_EPSILON  "1e-6"
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Tuple

from dotenv import load_dotenv

from recipe_recommender.logging_utils import get_logger, log_context

load_dotenv()  # loads .env

logger = get_logger(__name__)

# Behaviour type -> multiplier applied to the interaction value.
DEFAULT_BEHAVIOR_WEIGHTS: Dict[str, float] = {
    "browse": 1.0,
    "collect": 3.0,
    "rate": 4.0,
    "cook": 5.0,
}


class InvalidWeightsError(ValueError):
    """Raised when a hybrid weight triple cannot be normalized (sums to zero)."""


@dataclass(frozen=True)
class HybridWeights:
    content: float = 0.4
    user_cf: float = 0.3
    item_cf: float = 0.3

    def total(self) -> float:
        return self.content + self.user_cf + self.item_cf

    def normalized(self) -> "HybridWeights":
        """Return a copy scaled so the three weights sum to 1.0."""
        total = self.total()
        if total == 0:
            raise InvalidWeightsError(
                f"hybrid weights must not sum to zero: "
                f"content={self.content}, user_cf={self.user_cf}, item_cf={self.item_cf}"
            )
        return HybridWeights(
            content=self.content / total,
            user_cf=self.user_cf / total,
            item_cf=self.item_cf / total,
        )

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.content, self.user_cf, self.item_cf)


DEFAULT_HYBRID_WEIGHTS = HybridWeights(0.4, 0.3, 0.3)
NEW_USER_WEIGHTS = HybridWeights(0.8, 0.1, 0.1)


@dataclass(frozen=True)
class RecommenderSettings:
    hybrid_weights: HybridWeights = DEFAULT_HYBRID_WEIGHTS
    new_user_weights: HybridWeights = NEW_USER_WEIGHTS
    k_neighbors: int = 20
    oversample_factor: int = 2
    similarity_epsilon: float = 1e-6


def _parse_weights(var: str, default: HybridWeights) -> HybridWeights:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 3:
        raise ValueError(f"{var} must hold three comma-separated numbers, got {raw!r}")
    try:
        content, user_cf, item_cf = (float(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f"{var} must hold three comma-separated numbers, got {raw!r}") from exc
    return HybridWeights(content, user_cf, item_cf)


def _parse_number(var: str, default, cast):
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{var} must be a {cast.__name__}, got {raw!r}") from exc


def get_settings() -> RecommenderSettings:
    """Build RecommenderSettings from env vars, falling back to defaults."""
    try:
        hybrid = _parse_weights("RECSYS_HYBRID_WEIGHTS", DEFAULT_HYBRID_WEIGHTS).normalized()
        new_user = _parse_weights("RECSYS_NEW_USER_WEIGHTS", NEW_USER_WEIGHTS).normalized()
        k_neighbors = _parse_number("RECSYS_K_NEIGHBORS", 20, int)
        oversample = _parse_number("RECSYS_OVERSAMPLE", 2, int)
        epsilon = _parse_number("RECSYS_SIMILARITY_EPSILON", 1e-6, float)
    except ValueError as exc:
        logger.warning(
            "Invalid recommender configuration: %s",
            exc,
            extra=log_context(
                "get_settings",
                "Load recommender settings from environment",
                next_step="Raise to caller",
                resolution="Fix the RECSYS_* environment variables / .env file",
            ),
        )
        raise

    return RecommenderSettings(
        hybrid_weights=hybrid,
        new_user_weights=new_user,
        k_neighbors=max(1, k_neighbors),
        oversample_factor=max(1, oversample),
        similarity_epsilon=epsilon,
    )
