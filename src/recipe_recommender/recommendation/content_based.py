"""
content_based.py

Content-based recommender. No training phase: every (user, recipe) pair is
scored directly from the user's profile and the recipe's features, which is
what lets it serve brand-new users (cold start).

Score components:
  - static preference "category_value" found in recipe tags   -> +1.0
  - interest tag found in recipe tags                          -> +interest * tag_weight
  - interest tag found in recipe keywords                      -> +interest * keyword_weight * 0.5
  - context "key_value" found in recipe tags                   -> +2.0

Scores are not normalized.
"""
from __future__ import annotations

from typing import List, Sequence

from recipe_recommender.logging_utils import get_logger, log_context
from recipe_recommender.profiles.recipe_feature import RecipeFeatureStore, tag_key
from recipe_recommender.profiles.user_profile import UserProfileStore
from recipe_recommender.recommendation.base import RecipeScore, rank_scores

logger = get_logger(__name__)


class ContentBasedRecommender:
    STATIC_MATCH_SCORE = 1.0
    KEYWORD_FACTOR = 0.5
    CONTEXT_MATCH_SCORE = 2.0

    def __init__(self, user_profiles: UserProfileStore, recipe_features: RecipeFeatureStore) -> None:
        self.user_profiles = user_profiles
        self.recipe_features = recipe_features

    def score(self, user_id: str, recipe_id: str) -> float:
        profile = self.user_profiles.get_profile(user_id)
        feature = self.recipe_features.get_feature(recipe_id)
        tags = feature.tags
        keywords = feature.keywords

        total = 0.0

        for category, values in profile.static_preferences.items():
            for value in values:
                if tag_key(category, value) in tags:
                    total += self.STATIC_MATCH_SCORE

        # Tag and keyword matches are independent; both may fire for one interest
        for interest, weight in profile.interests.items():
            if interest in tags:
                total += weight * tags[interest]
            if interest in keywords:
                total += weight * keywords[interest] * self.KEYWORD_FACTOR

        for key, value in profile.context_info.items():
            if tag_key(key, value) in tags:
                total += self.CONTEXT_MATCH_SCORE

        return total

    # Alias of score() under the legacy API name
    calculate_similarity = score

    def recommend(self, user_id: str, candidate_ids: Sequence[str], top_n: int) -> List[RecipeScore]:
        scored = [RecipeScore(rid, self.score(user_id, rid)) for rid in candidate_ids]
        ranked = rank_scores(scored, top_n)
        logger.debug(
            "Content recommendations user=%s candidates=%d returned=%d",
            user_id,
            len(scored),
            len(ranked),
            extra=log_context("recommend", "Rank candidate recipes by profile overlap"),
        )
        return ranked
