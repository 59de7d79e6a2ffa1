"""
Templates feature

Starter projects for project creation.
"""
from src.features.templates.domain import Template
from src.features.templates.application import TemplateRegistry, create_default_registry

__all__ = ['Template', 'TemplateRegistry', 'create_default_registry']
