"""
Domain layer for projects.

Contains:
- Project aggregate
"""
from src.features.projects.domain.project import Project, CURRENT_SCHEMA_VERSION

__all__ = [
    'Project',
    'CURRENT_SCHEMA_VERSION',
]
