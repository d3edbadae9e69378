"""Exception hierarchy for Finboard."""


class FinboardError(Exception):
    """Base class for all Finboard errors."""


class WorkspaceNotFoundError(FinboardError):
    """No finboard.json found at the given location."""


class WorkspaceExistsError(FinboardError):
    """A workspace already exists at the target location."""


class ValidationError(FinboardError):
    """A record failed validation.

    Carries the message of the first violated rule and, when the rule
    concerns a single field, the field name.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DuplicateError(ValidationError):
    """A uniqueness constraint within a collection was violated."""

    def __init__(self, message: str, field: str):
        super().__init__(message, field)


class NotFoundError(FinboardError):
    """Update or delete targeted an id that is not in the collection."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} not found: {record_id}")
        self.entity = entity
        self.record_id = record_id
