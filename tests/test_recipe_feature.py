# =============================================
# File: tests/test_recipe_feature.py
# Purpose: Structured tag expansion and keyword merging
# =============================================
import pytest

from recipe_recommender.profiles.recipe_feature import Multiple, Single, as_attribute_value


def test_scalar_and_sequence_attributes_expand_to_tags(features):
    features.add_structured_tags(
        "r1",
        {"cuisine": "sichuan", "taste": ["spicy", "salty"], "difficulty": "easy"},
    )
    assert features.get_feature("r1").tags == {
        "cuisine_sichuan": 1.0,
        "taste_spicy": 1.0,
        "taste_salty": 1.0,
        "difficulty_easy": 1.0,
    }


def test_tagged_variants_are_accepted(features):
    features.add_structured_tags("r1", {"cuisine": Single("cantonese"), "taste": Multiple(("sweet", "fresh"))})
    assert set(features.get_feature("r1").tags) == {"cuisine_cantonese", "taste_sweet", "taste_fresh"}


def test_as_attribute_value_normalizes_boundary_shapes():
    assert as_attribute_value("a") == Single("a")
    assert as_attribute_value(("a", "b")) == Multiple(("a", "b"))
    assert as_attribute_value(30) == Single("30")
    assert as_attribute_value(None) is None


def test_structured_tags_merge_across_calls(features):
    features.add_structured_tags("r1", {"cuisine": "sichuan"})
    features.add_structured_tags("r1", {"season": "summer", "cuisine": "sichuan", "note": None})
    assert features.get_feature("r1").tags == {"cuisine_sichuan": 1.0, "season_summer": 1.0}


def test_keywords_overwrite_instead_of_accumulating(features):
    features.set_keywords("r1", {"numbing": 0.9, "homestyle": 0.6})
    features.extract_nlp_keywords("r1", "A numbing, appetising home dish.", {"numbing": 0.4})
    assert features.get_feature("r1").keywords == {"numbing": pytest.approx(0.4), "homestyle": pytest.approx(0.6)}


def test_unknown_recipe_gets_empty_feature(features):
    feature = features.get_feature("missing")
    assert feature.tags == {}
    assert feature.keywords == {}
    assert "missing" not in features
    assert len(features) == 0


def test_feature_vector_alias_returns_same_feature(features):
    features.add_structured_tags("r1", {"cuisine": "sichuan"})
    assert features.get_recipe_feature_vector("r1") is features.get_feature("r1")
