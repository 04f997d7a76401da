from __future__ import annotations

"""
user_profile.py

Purpose:
    In-memory user profile store feeding both recommenders.

Each UserProfile carries four signals:
  - static_preferences : declared preferences, category -> [values]
                         (e.g. {"cuisine": ["sichuan", "cantonese"]})
  - dynamic_behavior   : recipe_id -> accumulated behaviour score
  - interests          : tag -> accumulated interest weight
  - context_info       : context key -> current value (season, location, ...)

Behaviour scores are weighted by behaviour type using a table passed in at
construction (DEFAULT_BEHAVIOR_WEIGHTS if omitted). Unknown types weigh 1.0.

Profiles are created lazily on first write and never deleted. Reads for an
unknown user return an empty profile and do not register the user.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from recipe_recommender.config import DEFAULT_BEHAVIOR_WEIGHTS
from recipe_recommender.logging_utils import get_logger, log_context

logger = get_logger(__name__)

UNKNOWN_BEHAVIOR_WEIGHT = 1.0


@dataclass
class UserProfile:
    static_preferences: Dict[str, List[str]] = field(default_factory=dict)
    dynamic_behavior: Dict[str, float] = field(default_factory=dict)
    interests: Dict[str, float] = field(default_factory=dict)
    context_info: Dict[str, str] = field(default_factory=dict)


def _as_value_list(values) -> List[str]:
    # A bare string is one preference, not a sequence of characters
    if isinstance(values, str):
        return [values]
    return [str(v) for v in values]


class UserProfileStore:
    def __init__(self, behavior_weights: Optional[Mapping[str, float]] = None) -> None:
        table = DEFAULT_BEHAVIOR_WEIGHTS if behavior_weights is None else behavior_weights
        self.behavior_weights: Dict[str, float] = {k: float(v) for k, v in table.items()}
        self._profiles: Dict[str, UserProfile] = {}

    # ------------------------------------------------------------------
    # Public APIs
    # ------------------------------------------------------------------
    def create_static_profile(self, user_id: str, preferences: Mapping[str, Iterable[str]]) -> None:
        """Replace the user's static preferences wholesale (last write wins)."""
        profile = self._get_or_create(user_id)
        profile.static_preferences = {
            category: _as_value_list(values) for category, values in preferences.items()
        }

    def record_behavior(
        self,
        user_id: str,
        recipe_id: str,
        behavior_type: str,
        value: float = 1.0,
        recipe_tags: Optional[Mapping[str, float]] = None,
    ) -> None:
        """
        Accumulate one interaction into the profile.

        dynamic_behavior[recipe_id] += weight * value
        interests[tag]              += weight * value * tag_weight   (per tag)
        """
        profile = self._get_or_create(user_id)
        weight = self.behavior_weight(behavior_type)
        contribution = weight * float(value)

        profile.dynamic_behavior[recipe_id] = profile.dynamic_behavior.get(recipe_id, 0.0) + contribution

        if recipe_tags:
            for tag, tag_weight in recipe_tags.items():
                profile.interests[tag] = profile.interests.get(tag, 0.0) + contribution * float(tag_weight)

        logger.debug(
            "Recorded behaviour user=%s recipe=%s type=%s value=%s",
            user_id,
            recipe_id,
            behavior_type,
            value,
            extra=log_context(
                "record_behavior",
                "Accumulate behaviour score and interest tags",
                next_step="Rebuild CF matrices to reflect new behaviour",
            ),
        )

    # Alias under the legacy API name
    update_dynamic_profile = record_behavior

    def set_context(self, user_id: str, context: Mapping[str, str]) -> None:
        """Merge context keys into the profile; existing keys are overwritten."""
        profile = self._get_or_create(user_id)
        profile.context_info.update({k: str(v) for k, v in context.items()})

    # Alias under the legacy API name
    update_context_info = set_context

    def get_profile(self, user_id: str) -> UserProfile:
        return self._profiles.get(user_id) or UserProfile()

    def list_user_ids(self) -> List[str]:
        """Known user ids, in the order they were first referenced."""
        return list(self._profiles.keys())

    def behavior_weight(self, behavior_type: str) -> float:
        return self.behavior_weights.get(behavior_type, UNKNOWN_BEHAVIOR_WEIGHT)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_or_create(self, user_id: str) -> UserProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = UserProfile()
            self._profiles[user_id] = profile
        return profile
