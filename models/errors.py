"""
Error kinds raised by the portal operations
"""


class HostelPortalError(Exception):
    """Base class for all portal errors"""


class ValidationError(HostelPortalError):
    """A required field is missing, blank or out of range"""


class NotFoundError(ValidationError):
    """A hostel, room, resident or payment request id does not resolve"""


class CapacityExceededError(HostelPortalError):
    """The target room is already at capacity"""

    def __init__(self, hostel_name: str, room_number: str, capacity: int):
        self.hostel_name = hostel_name
        self.room_number = room_number
        self.capacity = capacity
        super().__init__(
            f"Room {room_number} in {hostel_name} has reached its maximum "
            f"resident limit ({capacity})"
        )


class CollaboratorError(HostelPortalError):
    """Persistence, notification or upload failure"""

    def __init__(self, collaborator: str, operation: str, cause: Exception = None):
        self.collaborator = collaborator
        self.operation = operation
        self.cause = cause
        message = f"{collaborator} failed during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
