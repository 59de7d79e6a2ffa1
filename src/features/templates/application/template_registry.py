"""
Template Registry

Holds the project templates available for project creation. Registries
are explicit instances handed to whoever needs them; there is no
module-level catalog to mutate.
"""
from typing import Dict, List, Optional

from src.features.templates.application.car_template import CAR_TEMPLATE
from src.features.templates.domain.template import Template
from src.shared.domain.errors import TemplateNotFoundError
from src.utils.message import Log


class TemplateRegistry:
    """
    Registry for project templates.

    Lookups are by exact template id.
    """

    def __init__(self):
        self._templates: Dict[str, Template] = {}

    def register(self, template: Template) -> None:
        """
        Register a template.

        Args:
            template: Template instance
        """
        if template.id in self._templates:
            Log.warning(f"TemplateRegistry: Overwriting existing template: {template.id}")

        self._templates[template.id] = template
        Log.debug(f"TemplateRegistry: Registered template '{template.id}' ({template.name})")

    def get(self, template_id: str) -> Optional[Template]:
        """Template by id, or None if not registered"""
        return self._templates.get(template_id)

    def require(self, template_id: str) -> Template:
        """
        Template by id.

        Raises:
            TemplateNotFoundError: If the id is not registered
        """
        template = self.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def all(self) -> List[Template]:
        """All templates in registration order"""
        return list(self._templates.values())

    def by_category(self, category: str) -> List[Template]:
        return [t for t in self._templates.values() if t.category == category]

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)


def create_default_registry() -> TemplateRegistry:
    """Registry holding the built-in templates."""
    registry = TemplateRegistry()
    registry.register(CAR_TEMPLATE)
    return registry
