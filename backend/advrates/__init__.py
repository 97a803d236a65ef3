"""Advance rate normalization, rate banding and disablement engine."""
