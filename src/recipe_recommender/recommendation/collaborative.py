"""
collaborative.py

User-based and item-based collaborative filtering over a dense user x recipe
interaction matrix built from the UserProfileStore.

Lifecycle:
  Unbuilt --build_matrices()--> MatricesBuilt --first lookup--> SimilarityComputed

  - build_matrices() is always a full rebuild from the current store snapshot
    and bumps `generation`.
  - User and item similarity matrices are computed lazily and cached together
    with the generation they were computed from. A cache whose generation no
    longer matches is stale and is recomputed on the next lookup, so a rebuild
    never serves similarities from an older matrix.

Similarity is cosine with epsilon-padded norms:

    sim(a, b) = dot(a, b) / ((||a|| + eps) * (||b|| + eps))

which keeps all-zero rows at similarity 0 instead of NaN.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from recipe_recommender.logging_utils import get_logger, log_context
from recipe_recommender.profiles.user_profile import UserProfileStore
from recipe_recommender.recommendation.base import RecipeScore, rank_scores

logger = get_logger(__name__)

DEFAULT_EPSILON = 1e-6
DEFAULT_K_NEIGHBORS = 20


def cosine_similarity_matrix(rows: np.ndarray, epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    """Pairwise cosine similarity between the rows of a 2-D array (self pairs included)."""
    rows = np.asarray(rows, dtype=float)
    if rows.ndim != 2:
        raise ValueError(f"expected a 2-D array, got shape {rows.shape}")

    norms = np.sqrt(np.einsum("ij,ij->i", rows, rows)) + epsilon
    dots = rows @ rows.T
    # matmul may differ in the last ulp between (i, j) and (j, i)
    dots = (dots + dots.T) / 2.0
    return dots / np.outer(norms, norms)


@dataclass
class _SimilarityCache:
    matrix: np.ndarray
    generation: int


class CollaborativeFilteringRecommender:
    def __init__(self, user_profiles: UserProfileStore, epsilon: float = DEFAULT_EPSILON) -> None:
        self.user_profiles = user_profiles
        self.epsilon = epsilon

        self._matrix: Optional[pd.DataFrame] = None
        self._user_index: Dict[str, int] = {}
        self._recipe_index: Dict[str, int] = {}
        self._generation = 0

        self._user_similarity: Optional[_SimilarityCache] = None
        self._item_similarity: Optional[_SimilarityCache] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def is_built(self) -> bool:
        return self._matrix is not None

    @property
    def generation(self) -> int:
        """Number of times the interaction matrix has been built."""
        return self._generation

    @property
    def user_item_matrix(self) -> Optional[pd.DataFrame]:
        return None if self._matrix is None else self._matrix.copy()

    @property
    def user_ids(self) -> List[str]:
        return list(self._user_index)

    @property
    def recipe_ids(self) -> List[str]:
        return list(self._recipe_index)

    @property
    def user_similarity_is_stale(self) -> bool:
        return self._is_stale(self._user_similarity)

    @property
    def item_similarity_is_stale(self) -> bool:
        return self._is_stale(self._item_similarity)

    def invalidate_similarities(self) -> None:
        self._user_similarity = None
        self._item_similarity = None

    # ------------------------------------------------------------------
    # Matrix construction
    # ------------------------------------------------------------------
    def build_matrices(self) -> None:
        """Rebuild index maps and the user x recipe matrix from the profile store."""
        user_ids = self.user_profiles.list_user_ids()
        behaviors = [self.user_profiles.get_profile(uid).dynamic_behavior for uid in user_ids]

        recipe_index: Dict[str, int] = {}
        for behavior in behaviors:
            for recipe_id in behavior:
                if recipe_id not in recipe_index:
                    recipe_index[recipe_id] = len(recipe_index)

        values = np.zeros((len(user_ids), len(recipe_index)), dtype=float)
        for row, behavior in enumerate(behaviors):
            for recipe_id, score in behavior.items():
                values[row, recipe_index[recipe_id]] = float(score)

        self._matrix = pd.DataFrame(
            values,
            index=pd.Index(user_ids, name="user_id", dtype=object),
            columns=pd.Index(list(recipe_index), name="recipe_id", dtype=object),
        )
        self._user_index = {uid: i for i, uid in enumerate(user_ids)}
        self._recipe_index = recipe_index
        self._generation += 1

        logger.info(
            "Built interaction matrix %d users x %d recipes (generation %d)",
            len(user_ids),
            len(recipe_index),
            self._generation,
            extra=log_context(
                "build_matrices",
                "Snapshot user behaviour into a dense interaction matrix",
                next_step="Similarity caches from older generations will be recomputed on use",
            ),
        )

    # ------------------------------------------------------------------
    # Similarity
    # ------------------------------------------------------------------
    def calculate_user_similarity(self) -> pd.DataFrame:
        """(Re)compute the user x user cosine similarity matrix."""
        values = self._require_matrix().to_numpy()
        sims = cosine_similarity_matrix(values, self.epsilon)
        self._user_similarity = _SimilarityCache(sims, self._generation)
        self._log_similarity("user", sims.shape[0])
        return pd.DataFrame(sims, index=self.user_ids, columns=self.user_ids)

    def calculate_item_similarity(self) -> pd.DataFrame:
        """(Re)compute the recipe x recipe cosine similarity matrix."""
        values = self._require_matrix().to_numpy()
        sims = cosine_similarity_matrix(values.T, self.epsilon)
        self._item_similarity = _SimilarityCache(sims, self._generation)
        self._log_similarity("item", sims.shape[0])
        return pd.DataFrame(sims, index=self.recipe_ids, columns=self.recipe_ids)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------
    def user_based_recommend(
        self, user_id: str, top_n: int, k_neighbors: int = DEFAULT_K_NEIGHBORS
    ) -> List[RecipeScore]:
        """
        Predict scores for recipes the user has not interacted with from the
        k most similar users:

            pred(j) = sum(sim_i * r_ij) / sum(sim_i)   over neighbours with r_ij > 0

        Recipes no neighbour has rated are left out.
        """
        if not self.is_built or user_id not in self._user_index:
            return []

        sims = self._user_similarity_matrix()
        ratings = self._matrix.to_numpy()
        u = self._user_index[user_id]

        others = [i for i in range(ratings.shape[0]) if i != u]
        neighbors = sorted(others, key=lambda i: sims[u, i], reverse=True)[: max(0, k_neighbors)]
        if not neighbors:
            return []

        neighbor_ratings = ratings[neighbors]
        rated_mask = neighbor_ratings > 0
        neighbor_sims = sims[u, neighbors][:, np.newaxis]

        numerator = (neighbor_sims * neighbor_ratings * rated_mask).sum(axis=0)
        denominator = (neighbor_sims * rated_mask).sum(axis=0)

        unrated = ratings[u] <= 0
        predictions = self._collect_predictions(unrated & (denominator > 0), numerator, denominator)
        return rank_scores(predictions, top_n)

    def item_based_recommend(self, user_id: str, top_n: int) -> List[RecipeScore]:
        """
        Predict scores for unrated recipes from their similarity to the
        recipes the user did rate:

            pred(j) = sum(sim_jk * r_k) / sum(|sim_jk|)   over rated k
        """
        if not self.is_built or user_id not in self._user_index:
            return []

        sims = self._item_similarity_matrix()
        user_vector = self._matrix.to_numpy()[self._user_index[user_id]]

        rated = np.flatnonzero(user_vector > 0)
        if rated.size == 0:
            return []

        rated_sims = sims[:, rated]
        numerator = rated_sims @ user_vector[rated]
        denominator = np.abs(rated_sims).sum(axis=1)

        unrated = user_vector <= 0
        predictions = self._collect_predictions(unrated & (denominator > 0), numerator, denominator)
        return rank_scores(predictions, top_n)

    def similar_users(self, user_id: str, top_n: int) -> List[Tuple[str, float]]:
        """Most similar other users, most similar first."""
        if not self.is_built or user_id not in self._user_index:
            return []
        sims = self._user_similarity_matrix()
        u = self._user_index[user_id]
        pairs = [(uid, float(sims[u, i])) for uid, i in self._user_index.items() if i != u]
        pairs.sort(key=lambda p: p[1], reverse=True)
        return pairs[: max(0, top_n)]

    def similar_items(self, recipe_id: str, top_n: int) -> List[RecipeScore]:
        """Recipes whose interaction columns look most like `recipe_id`'s."""
        if not self.is_built or recipe_id not in self._recipe_index:
            return []
        sims = self._item_similarity_matrix()
        j = self._recipe_index[recipe_id]
        scores = [RecipeScore(rid, float(sims[j, k])) for rid, k in self._recipe_index.items() if k != j]
        return rank_scores(scores, top_n)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_matrix(self) -> pd.DataFrame:
        if self._matrix is None:
            self.build_matrices()
        return self._matrix

    def _is_stale(self, cache: Optional[_SimilarityCache]) -> bool:
        return cache is None or cache.generation != self._generation

    def _user_similarity_matrix(self) -> np.ndarray:
        if self.user_similarity_is_stale:
            self.calculate_user_similarity()
        return self._user_similarity.matrix

    def _item_similarity_matrix(self) -> np.ndarray:
        if self.item_similarity_is_stale:
            self.calculate_item_similarity()
        return self._item_similarity.matrix

    def _collect_predictions(
        self, mask: np.ndarray, numerator: np.ndarray, denominator: np.ndarray
    ) -> List[RecipeScore]:
        recipe_ids = self.recipe_ids
        return [
            RecipeScore(recipe_ids[j], float(numerator[j] / denominator[j]))
            for j in np.flatnonzero(mask)
        ]

    def _log_similarity(self, axis: str, size: int) -> None:
        logger.info(
            "Computed %s similarity matrix %dx%d (generation %d)",
            axis,
            size,
            size,
            self._generation,
            extra=log_context(
                f"calculate_{axis}_similarity",
                "Cosine similarity over the interaction matrix",
                next_step="Cache until the interaction matrix is rebuilt",
            ),
        )


# ----------------------------------------------------------------------
# Adapters exposing each CF variant through the common Recommender contract
# ----------------------------------------------------------------------
class UserBasedRecommender:
    """User-based CF as a Recommender. Predicts over every unrated recipe, so
    candidate_ids is not used to filter."""

    def __init__(self, cf: CollaborativeFilteringRecommender, k_neighbors: int = DEFAULT_K_NEIGHBORS) -> None:
        self.cf = cf
        self.k_neighbors = k_neighbors

    def recommend(self, user_id: str, candidate_ids: Sequence[str], top_n: int) -> List[RecipeScore]:
        return self.cf.user_based_recommend(user_id, top_n, self.k_neighbors)


class ItemBasedRecommender:
    def __init__(self, cf: CollaborativeFilteringRecommender) -> None:
        self.cf = cf

    def recommend(self, user_id: str, candidate_ids: Sequence[str], top_n: int) -> List[RecipeScore]:
        return self.cf.item_based_recommend(user_id, top_n)
