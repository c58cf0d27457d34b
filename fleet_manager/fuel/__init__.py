"""Fuel economy calculations."""
from .mpg import compute_mpg, cost_per_gallon, recompute_mpg, recompute_series

__all__ = ["compute_mpg", "cost_per_gallon", "recompute_mpg", "recompute_series"]
