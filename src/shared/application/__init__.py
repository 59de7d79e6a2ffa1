"""Shared application services used across features."""
