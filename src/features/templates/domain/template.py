"""
Template entity

A named recipe that produces a starter Project. Templates are pure
producers: build() returns a fresh Project value and touches no state.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from src.features.projects.domain.project import Project


# build(name, description) -> Project
ProjectBuilder = Callable[[str, Optional[str]], Project]


@dataclass(frozen=True)
class Template:
    """Metadata for a project template"""
    id: str
    name: str
    description: str
    build: ProjectBuilder
    category: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Template id cannot be empty")

    def to_dict(self) -> dict:
        """Catalog entry without the builder"""
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }
        if self.category is not None:
            data["category"] = self.category
        return data
