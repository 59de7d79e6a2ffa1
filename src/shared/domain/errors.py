"""
Domain errors

Exceptions raised by project operations. Update/remove operations on
unknown ids are no-ops and never raise; only operations that cannot produce
a meaningful snapshot raise one of these.
"""


class RequireError(Exception):
    """Base exception for domain operations."""
    pass


class InterfaceReferenceError(RequireError, LookupError):
    """Raised when a connection endpoint does not resolve to a component interface."""

    def __init__(self, component_id: str, interface_id: str, role: str = "endpoint"):
        self.component_id = component_id
        self.interface_id = interface_id
        self.role = role
        super().__init__(
            f"Invalid interface IDs: {role} interface '{interface_id}' "
            f"not found on component '{component_id}'"
        )


class DefaultViewRemovalError(RequireError, ValueError):
    """Raised when removing the project's default system view."""

    def __init__(self, view_id: str):
        self.view_id = view_id
        super().__init__(f"System view '{view_id}' is the default view and cannot be removed")


class TemplateNotFoundError(RequireError, KeyError):
    """Raised when a template id is not registered."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template '{template_id}' not found")

    def __str__(self) -> str:
        return self.args[0]


class ProjectValidationError(RequireError, ValueError):
    """Raised when a persisted project record cannot be reconstructed."""
    pass
