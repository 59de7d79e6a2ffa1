"""
Projects feature module.

Usage:
    from src.features.projects.domain import Project
    from src.features.projects.application import project_store
    from src.features.projects.application.project_library import ProjectLibrary
"""
# Only export domain by default - application via submodules
from src.features.projects.domain import Project

__all__ = ['Project']
