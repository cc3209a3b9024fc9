from .record import Contact
from .registry import ContactRegistry, MAX_CONTACTS
from .config import Config, load_config
from .exceptions import (
    RolodexError,
    InvalidArgument,
    DuplicateKey,
    NotFound,
    CapacityExceeded,
    AtomicUpdateError,
    InternalError,
    RollbackFailed,
)

__all__ = [
    "Contact",
    "ContactRegistry",
    "MAX_CONTACTS",
    "Config",
    "load_config",
    "RolodexError",
    "InvalidArgument",
    "DuplicateKey",
    "NotFound",
    "CapacityExceeded",
    "AtomicUpdateError",
    "InternalError",
    "RollbackFailed",
]
