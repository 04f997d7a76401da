# =============================================
# File: tests/test_content_based.py
# Purpose: Content scoring components and ranking behaviour
# =============================================
import pytest


def test_no_overlap_scores_exactly_zero(profiles, features, content):
    profiles.create_static_profile("u1", {"cuisine": ["A"]})
    profiles.set_context("u1", {"season": "winter"})
    profiles.record_behavior("u1", "r0", "collect", 1.0, {"taste_sweet": 1.0})
    features.add_structured_tags("r1", {"cuisine": "B", "season": "summer", "taste": ["spicy"]})
    features.set_keywords("r1", {"numbing": 0.9})

    assert content.score("u1", "r1") == 0.0


def test_static_preference_match_and_context_bonus(profiles, features, content):
    profiles.create_static_profile("u1", {"cuisine": ["A"]})
    features.add_structured_tags("r1", {"cuisine": "A", "season": "summer"})

    without_context = content.score("u1", "r1")
    assert without_context >= 1.0

    profiles.set_context("u1", {"season": "summer"})
    assert content.score("u1", "r1") == pytest.approx(without_context + 2.0)


def test_every_preference_value_counts(profiles, features, content):
    profiles.create_static_profile("u1", {"taste": ["spicy", "salty", "sweet"]})
    features.add_structured_tags("r1", {"taste": ["spicy", "salty"]})
    assert content.score("u1", "r1") == pytest.approx(2.0)


def test_interest_matches_tags_and_keywords_independently(profiles, features, content):
    # collect (3.0) * value 2.0 * tag weight 0.5 -> interest 3.0
    profiles.record_behavior("u1", "r0", "collect", 2.0, {"numbing": 0.5})
    features.add_structured_tags("r1", {"flavour": "x"})
    features.get_feature("r1").tags["numbing"] = 1.0
    features.set_keywords("r1", {"numbing": 0.8})
    features.set_keywords("r2", {"numbing": 0.8})

    # tag: 3.0 * 1.0, keyword: 3.0 * 0.8 * 0.5
    assert content.score("u1", "r1") == pytest.approx(3.0 + 1.2)
    assert content.calculate_similarity("u1", "r2") == pytest.approx(1.2)


def test_recommend_sorts_descending_and_keeps_candidate_order_on_ties(profiles, features, content):
    profiles.create_static_profile("u1", {"cuisine": ["A"]})
    profiles.set_context("u1", {"season": "summer"})
    features.add_structured_tags("hot", {"cuisine": "A", "season": "summer"})
    features.add_structured_tags("warm", {"cuisine": "A"})
    features.add_structured_tags("warm2", {"cuisine": "A"})

    recs = content.recommend("u1", ["cold", "warm", "hot", "cold2", "warm2"], 10)

    assert [r.recipe_id for r in recs] == ["hot", "warm", "warm2", "cold", "cold2"]
    assert [r.score for r in recs] == [3.0, 1.0, 1.0, 0.0, 0.0]


def test_recommend_truncates_to_top_n(profiles, features, content):
    candidates = [f"r{i}" for i in range(5)]
    assert len(content.recommend("u1", candidates, 3)) == 3
    assert len(content.recommend("u1", candidates, 10)) == 5
    assert content.recommend("u1", candidates, 0) == []
    assert content.recommend("u1", [], 3) == []


def test_unknown_user_and_recipes_score_zero(content):
    recs = content.recommend("nobody", ["x", "y"], 2)
    assert [(r.recipe_id, r.score) for r in recs] == [("x", 0.0), ("y", 0.0)]
