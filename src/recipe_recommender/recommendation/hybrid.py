"""
hybrid.py

Hybrid recommender: weighted sum of content-based, user-based CF and
item-based CF scores.

  fused(recipe) = w_content * content(recipe)
                + w_user_cf * user_cf(recipe)
                + w_item_cf * item_cf(recipe)

A source that did not return a recipe contributes 0 for it. Each source is
asked for top_n * oversample_factor results so that overlap between sources
does not starve the final top_n.

New users have little or no behaviour, so for them the call uses the
cold-start weights (content-heavy, 0.8 / 0.1 / 0.1 by default) instead of the
stored weights. The stored weights are not touched.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from recipe_recommender.config import (
    HybridWeights,
    InvalidWeightsError,
    RecommenderSettings,
    get_settings,
)
from recipe_recommender.logging_utils import get_logger, log_context
from recipe_recommender.profiles.recipe_feature import RecipeFeatureStore
from recipe_recommender.profiles.user_profile import UserProfileStore
from recipe_recommender.recommendation.base import RecipeScore, Recommender, rank_scores
from recipe_recommender.recommendation.collaborative import (
    CollaborativeFilteringRecommender,
    ItemBasedRecommender,
    UserBasedRecommender,
)
from recipe_recommender.recommendation.content_based import ContentBasedRecommender

logger = get_logger(__name__)


class HybridRecommender:
    """
    Blend content, user CF and item CF recommendations.

    Both constructors read RECSYS_* environment settings through get_settings()
    unless an explicit RecommenderSettings is passed.
    """

    def __init__(
        self,
        content: ContentBasedRecommender,
        cf: CollaborativeFilteringRecommender,
        settings: Optional[RecommenderSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.content = content
        self.cf = cf
        self._weights = self.settings.hybrid_weights.normalized()

        self._sources: List[Tuple[str, Recommender]] = [
            ("content", content),
            ("user_cf", UserBasedRecommender(cf, k_neighbors=self.settings.k_neighbors)),
            ("item_cf", ItemBasedRecommender(cf)),
        ]

    @classmethod
    def from_stores(
        cls,
        user_profiles: UserProfileStore,
        recipe_features: RecipeFeatureStore,
        settings: Optional[RecommenderSettings] = None,
    ) -> "HybridRecommender":
        """Wire content + CF recommenders over the given stores (env settings by default)."""
        settings = settings or get_settings()
        content = ContentBasedRecommender(user_profiles, recipe_features)
        cf = CollaborativeFilteringRecommender(user_profiles, epsilon=settings.similarity_epsilon)
        return cls(content, cf, settings)

    @property
    def weights(self) -> HybridWeights:
        return self._weights

    def set_weights(self, content: float, user_cf: float, item_cf: float) -> None:
        """Store the weights scaled to sum to 1.0. Raises InvalidWeightsError if they sum to 0."""
        try:
            self._weights = HybridWeights(float(content), float(user_cf), float(item_cf)).normalized()
        except InvalidWeightsError as exc:
            logger.warning(
                "Rejected hybrid weights: %s",
                exc,
                extra=log_context(
                    "set_weights",
                    "Configure blend of content / user CF / item CF",
                    next_step="Keep previous weights and raise to caller",
                    resolution="Pass at least one non-zero weight",
                ),
            )
            raise

        logger.info(
            "Hybrid weights set content=%.3f user_cf=%.3f item_cf=%.3f",
            *self._weights.as_tuple(),
            extra=log_context(
                "set_weights",
                "Configure blend of content / user CF / item CF",
                next_step="Used by subsequent recommend() calls",
            ),
        )

    def recommend(
        self,
        user_id: str,
        candidate_ids: Sequence[str],
        top_n: int,
        is_new_user: bool = False,
    ) -> List[RecipeScore]:
        # Each source scores a recipe once, whatever the candidate multiplicity
        candidate_ids = list(dict.fromkeys(candidate_ids))
        weights = self.settings.new_user_weights if is_new_user else self._weights
        by_source = {
            "content": weights.content,
            "user_cf": weights.user_cf,
            "item_cf": weights.item_cf,
        }

        if not self.cf.is_built:
            self.cf.build_matrices()

        pool = top_n * self.settings.oversample_factor
        fused: Dict[str, float] = {}
        counts: Dict[str, int] = {}
        for name, recommender in self._sources:
            recs = recommender.recommend(user_id, candidate_ids, pool)
            counts[name] = len(recs)
            weight = by_source[name]
            for rec in recs:
                fused[rec.recipe_id] = fused.get(rec.recipe_id, 0.0) + rec.score * weight

        ranked = rank_scores((RecipeScore(rid, score) for rid, score in fused.items()), top_n)

        logger.debug(
            "Hybrid recommendations user=%s new_user=%s sources=%s returned=%d",
            user_id,
            is_new_user,
            counts,
            len(ranked),
            extra=log_context("recommend", "Blend recommender outputs into one ranking"),
        )
        return ranked
