"""
Application layer for system views.

Usage:
    from src.features.system_views.application import system_view_commands
"""
from src.features.system_views.application import system_view_commands

__all__ = ['system_view_commands']
