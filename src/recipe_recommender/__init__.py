"""
Recipe Recommender

Hybrid recipe recommendation engine combining:
  - declared static preferences and context (content-based scoring)
  - accumulated behaviour (user-based and item-based collaborative filtering)
  - a cold-start aware weighted blend of the two (hybrid)

Storage, UI and keyword extraction live outside this package; the engine
works on in-memory profile and feature stores.
"""
from recipe_recommender.config import (
    DEFAULT_BEHAVIOR_WEIGHTS,
    HybridWeights,
    InvalidWeightsError,
    RecommenderSettings,
    get_settings,
)
from recipe_recommender.profiles.recipe_feature import (
    Multiple,
    RecipeFeature,
    RecipeFeatureStore,
    Single,
)
from recipe_recommender.profiles.user_profile import UserProfile, UserProfileStore
from recipe_recommender.recommendation.base import RecipeScore, Recommender
from recipe_recommender.recommendation.collaborative import (
    CollaborativeFilteringRecommender,
    ItemBasedRecommender,
    UserBasedRecommender,
)
from recipe_recommender.recommendation.content_based import ContentBasedRecommender
from recipe_recommender.recommendation.hybrid import HybridRecommender

__all__ = [
    "DEFAULT_BEHAVIOR_WEIGHTS",
    "HybridWeights",
    "InvalidWeightsError",
    "RecommenderSettings",
    "get_settings",
    "Multiple",
    "RecipeFeature",
    "RecipeFeatureStore",
    "Single",
    "UserProfile",
    "UserProfileStore",
    "RecipeScore",
    "Recommender",
    "CollaborativeFilteringRecommender",
    "ItemBasedRecommender",
    "UserBasedRecommender",
    "ContentBasedRecommender",
    "HybridRecommender",
]
