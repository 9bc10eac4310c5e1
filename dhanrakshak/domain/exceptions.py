"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Caller passed a structurally invalid value (programmer error, not bad message text)"""

    pass


class AICollaboratorError(DomainException):
    """AI collaborator timed out, returned an error or an unusable envelope"""

    pass
