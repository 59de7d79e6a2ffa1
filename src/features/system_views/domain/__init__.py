"""
Domain layer for system views.
"""
from src.features.system_views.domain.system_view import (
    SystemView,
    DEFAULT_POSITION,
    DEFAULT_VIEW_NAME,
    create_default_view,
    create_empty_view,
    resolve_position,
    is_visible,
    is_interface_visible,
    next_grid_position,
    with_position,
)

__all__ = [
    'SystemView',
    'DEFAULT_POSITION',
    'DEFAULT_VIEW_NAME',
    'create_default_view',
    'create_empty_view',
    'resolve_position',
    'is_visible',
    'is_interface_visible',
    'next_grid_position',
    'with_position',
]
