"""Templates application layer."""
from src.features.templates.application.car_template import CAR_TEMPLATE, create_car_project
from src.features.templates.application.template_registry import TemplateRegistry, create_default_registry

__all__ = [
    'CAR_TEMPLATE',
    'create_car_project',
    'TemplateRegistry',
    'create_default_registry',
]
