"""Persistence implementations."""
