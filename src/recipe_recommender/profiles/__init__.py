"""Profile and feature stores consumed by the recommenders."""
