"""Require application package."""
