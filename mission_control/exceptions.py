#  Mission Control - Custom Exceptions
#
#  Typed exception hierarchy so routes can map business errors to HTTP
#  status codes without pattern-matching on message strings.
#  Each class carries a machine-readable code returned to clients.
#
#  Depends on: (none)
#  Used by:    services/*, middleware/auth.py, app.py

class MissionControlError(Exception):
    """Base exception for all mission control business logic errors."""

    code = "error"


class ValidationError(MissionControlError):
    """Input is malformed or outside its allowed vocabulary."""

    code = "validation_error"


class NotFoundError(MissionControlError):
    """Referenced entity (project, mission, task, approval, agent) does not exist."""

    code = "not_found"


class UnknownReferenceError(NotFoundError):
    """A request body names an entity that does not exist."""

    code = "unknown_reference"


class ConflictError(MissionControlError):
    """Operation not allowed in the entity's current state."""

    code = "conflict"


class UnauthorizedError(MissionControlError):
    """Missing or incorrect bearer credential."""

    code = "unauthorized"


class StorageError(MissionControlError):
    """The durable write failed. Fatal to the request, never retried."""

    code = "storage_error"
