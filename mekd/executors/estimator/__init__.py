"""Regression formulas for the corruption and IPM estimates."""
