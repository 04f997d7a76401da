"""
Recommendation layer (Recipe Recommender)

This package contains the three recommenders and the hybrid that blends them:
  - content_based : profile/tag overlap, works for brand-new users
  - collaborative : user-based and item-based CF over the interaction matrix
  - hybrid        : weighted fusion with cold-start weights

All of them return ranked RecipeScore lists (see base.py).
"""
