"""Shared value objects."""
from src.shared.domain.value_objects.point import Point

__all__ = ['Point']
