"""Templates domain layer."""
from src.features.templates.domain.template import Template, ProjectBuilder

__all__ = ['Template', 'ProjectBuilder']
