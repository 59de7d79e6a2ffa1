"""
Application layer for projects feature.

Contains:
- project_store - invariant-preserving project operations
- project_normalization - load-time validation and migration
- ProjectLibrary - persisted projects, interface catalog, current project
"""
from src.features.projects.application.project_store import (
    CompatibilityIssue,
    add_component,
    add_interface_to_component,
    calculate_completeness,
    create_connection,
    create_from_template,
    create_project,
    find_component,
    find_interface,
    find_orphaned_components,
    get_children,
    get_compatibility_issues,
    get_descendant_ids,
    remove_component,
    remove_connection,
    remove_interface_from_component,
    update_component,
)
from src.features.projects.application.project_normalization import (
    normalize_project,
    validate_and_migrate_project,
)
from src.features.projects.application.project_library import ProjectLibrary, STORAGE_KEYS

__all__ = [
    'CompatibilityIssue',
    'add_component',
    'add_interface_to_component',
    'calculate_completeness',
    'create_connection',
    'create_from_template',
    'create_project',
    'find_component',
    'find_interface',
    'find_orphaned_components',
    'get_children',
    'get_compatibility_issues',
    'get_descendant_ids',
    'remove_component',
    'remove_connection',
    'remove_interface_from_component',
    'update_component',
    'normalize_project',
    'validate_and_migrate_project',
    'ProjectLibrary',
    'STORAGE_KEYS',
]
