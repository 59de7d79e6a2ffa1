"""
System views feature module (saved layouts over the shared component graph).

Usage:
    from src.features.system_views.domain import SystemView, resolve_position
    from src.features.system_views.application import system_view_commands
"""
from src.features.system_views.domain import SystemView

__all__ = ['SystemView']
