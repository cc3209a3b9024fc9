class RolodexError(Exception):
    """Base class for exceptions in this module."""


class InvalidArgument(RolodexError, ValueError):
    """Raised when an id or field value is malformed."""


class DuplicateKey(RolodexError):
    """Raised when adding a contact whose id is already present."""


class NotFound(RolodexError):
    """Raised when an operation targets an id that is not present."""


class CapacityExceeded(RolodexError):
    """Raised when adding to a registry that is full."""


class AtomicUpdateError(RolodexError):
    """Raised when a multi-field update fails and has been rolled back."""


class InternalError(RolodexError):
    """Raised on an unexpected failure during an otherwise valid operation."""


class RollbackFailed(InternalError):
    """Raised when restoring a contact's previous values fails."""
