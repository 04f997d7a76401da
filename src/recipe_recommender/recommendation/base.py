"""
base.py

Shared contracts for every recommender in this package:
  - RecipeScore: the (recipe_id, score) unit of ranked output
  - Recommender: the single capability the hybrid layer depends on
  - rank_scores(): stable "sort desc + truncate" used by all recommenders
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence


@dataclass(frozen=True)
class RecipeScore:
    recipe_id: str
    score: float

    def __str__(self) -> str:
        return f"RecipeScore(recipe_id={self.recipe_id!r}, score={self.score:.4f})"


class Recommender(Protocol):
    """Anything that can rank recipes for a user."""

    def recommend(self, user_id: str, candidate_ids: Sequence[str], top_n: int) -> List[RecipeScore]:
        ...


def rank_scores(scores: Iterable[RecipeScore], top_n: int) -> List[RecipeScore]:
    """Sort descending by score and keep the first top_n.

    sorted() is stable, so equal scores keep the order they were produced in.
    """
    if top_n <= 0:
        return []
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    return ranked[:top_n]
