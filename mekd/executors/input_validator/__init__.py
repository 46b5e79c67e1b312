"""Positivity gate for logarithm arguments."""
