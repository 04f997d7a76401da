# =============================================
# File: tests/conftest.py
# Purpose: Shared stores and a small interaction world for recommender tests
# =============================================
import pytest

from recipe_recommender.profiles.recipe_feature import RecipeFeatureStore
from recipe_recommender.profiles.user_profile import UserProfileStore
from recipe_recommender.recommendation.collaborative import CollaborativeFilteringRecommender
from recipe_recommender.recommendation.content_based import ContentBasedRecommender


@pytest.fixture
def profiles():
    return UserProfileStore()


@pytest.fixture
def features():
    return RecipeFeatureStore()


@pytest.fixture
def content(profiles, features):
    return ContentBasedRecommender(profiles, features)


@pytest.fixture
def cf_world(profiles):
    """
    'browse' has weight 1.0, so the interaction matrix holds the raw values:

              r1   r2   r3   r4
      alice    5    3    0    0
      bob      4    3    5    0
      carol    0    0    4    2
    """
    for user_id, recipe_id, value in [
        ("alice", "r1", 5),
        ("alice", "r2", 3),
        ("bob", "r1", 4),
        ("bob", "r2", 3),
        ("bob", "r3", 5),
        ("carol", "r3", 4),
        ("carol", "r4", 2),
    ]:
        profiles.record_behavior(user_id, recipe_id, "browse", value)

    cf = CollaborativeFilteringRecommender(profiles)
    cf.build_matrices()
    return cf
