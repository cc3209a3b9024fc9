import threading
from typing import Any, Iterable
from pydantic import ValidationError
from structlog import get_logger

from .config import Config, MAX_CONTACTS
from .record import Contact, FIELD_LABELS, UPDATABLE_FIELDS
from .exceptions import (
    AtomicUpdateError,
    CapacityExceeded,
    DuplicateKey,
    InternalError,
    InvalidArgument,
    NotFound,
    RollbackFailed,
)

log = get_logger()

MAX_ID_LENGTH = 100


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(err["msg"] for err in exc.errors())
    return str(exc)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class ContactRegistry:
    """
    Thread-safe in-memory store of contacts keyed by id.

    Every public method holds the registry lock for its whole body.
    Stored contacts never leave the lock: reads hand out copies and
    `add_contact` keeps its own copy of what it is given.
    """

    def __init__(self, capacity: int = MAX_CONTACTS):
        if capacity <= 0:
            raise InvalidArgument(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._contacts: dict[str, Contact] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Config) -> "ContactRegistry":
        return cls(capacity=config.capacity)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self._contacts)}/{self.capacity})"

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, contact_id: object) -> bool:
        return self.contains_contact(contact_id)

    # section: mutation #######################################################

    def add_contact(self, contact: Contact) -> None:
        with self._lock:
            if contact is None:
                raise InvalidArgument("contact cannot be None")
            if not isinstance(contact, Contact):
                raise InvalidArgument(
                    f"expected a Contact, got {type(contact).__name__}"
                )
            # model_construct() may leave fields unset, id included
            contact_id = getattr(contact, "id", None)
            self._check_id(contact_id, "add")
            if contact_id in self._contacts:
                log.warning("duplicate contact", id=contact_id)
                raise DuplicateKey(f"contact id already exists: {contact_id}")
            if len(self._contacts) >= self.capacity:
                log.warning("registry full", id=contact_id, capacity=self.capacity)
                raise CapacityExceeded(
                    f"maximum contact capacity of {self.capacity} reached"
                )
            # re-validate: model_construct() skips validation entirely
            try:
                stored = type(contact).model_validate(dict(contact.__dict__))
            except ValidationError as e:
                raise InvalidArgument(
                    f"contact has invalid internal state: {_describe(e)}"
                ) from e
            self._contacts[contact_id] = stored
            log.info("contact added", id=contact_id, count=len(self._contacts))

    def add_contacts(self, contacts: Iterable[Contact]) -> int:
        """
        Add contacts one at a time, stopping at the first failure.

        Contacts added before the failure stay in the registry.
        """
        num_added = 0
        for contact in contacts:
            self.add_contact(contact)
            num_added += 1
        return num_added

    def delete_contact(self, contact_id: str) -> None:
        with self._lock:
            self._check_id(contact_id, "delete")
            if contact_id not in self._contacts:
                raise NotFound(f"contact not found with id: {contact_id}")
            del self._contacts[contact_id]
            log.info("contact deleted", id=contact_id, count=len(self._contacts))

    def update_first_name(self, contact_id: str, first_name: str) -> None:
        self._update_field(contact_id, "first_name", first_name)

    def update_last_name(self, contact_id: str, last_name: str) -> None:
        self._update_field(contact_id, "last_name", last_name)

    def update_phone(self, contact_id: str, phone: str) -> None:
        self._update_field(contact_id, "phone", phone)

    def update_address(self, contact_id: str, address: str) -> None:
        self._update_field(contact_id, "address", address)

    def update_contact(
        self,
        contact_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> None:
        """
        Update several fields of a contact as a unit.

        Fields passed as None are left alone. Fields are applied in the
        order first name, last name, phone, address; if any of them fails
        every field is restored and AtomicUpdateError is raised with the
        original failure as its cause.

        Raises:
            InvalidArgument: contact_id is malformed
            NotFound: no contact with this id
            AtomicUpdateError: a field was rejected, nothing changed
            RollbackFailed: restoring the previous values failed
        """
        with self._lock:
            self._check_id(contact_id, "update contact")
            contact = self._get_or_raise(contact_id)
            snapshot = {name: getattr(contact, name) for name in UPDATABLE_FIELDS}
            changes = {
                "first_name": first_name,
                "last_name": last_name,
                "phone": phone,
                "address": address,
            }
            applied = []
            try:
                for name in UPDATABLE_FIELDS:
                    value = changes[name]
                    if value is None:
                        continue
                    self._check_value(value, name)
                    setattr(contact, name, value)
                    applied.append(name)
            except Exception as e:
                lg = log.bind(id=contact_id, applied=applied, exception=repr(e))
                if isinstance(e, (ValidationError, InvalidArgument)):
                    lg.info("rolling back rejected update")
                else:
                    lg.error("rolling back after unexpected error")
                self._restore(contact, snapshot)
                raise AtomicUpdateError(
                    f"failed to update contact {contact_id}: {_describe(e)}"
                ) from e
            if applied:
                log.info("contact updated", id=contact_id, fields=applied)

    def clear(self) -> None:
        with self._lock:
            num_removed = len(self._contacts)
            self._contacts.clear()
            log.info("registry cleared", removed=num_removed)

    # section: queries ########################################################

    def get_contact(self, contact_id: str | None) -> Contact | None:
        """
        Return a copy of the contact, or None if there is no such contact.

        Never raises, unlike get_contact_or_raise.
        """
        with self._lock:
            if _is_blank(contact_id):
                return None
            contact = self._contacts.get(contact_id)  # type: ignore[arg-type]
            return contact.model_copy() if contact is not None else None

    def get_contact_or_raise(self, contact_id: str) -> Contact:
        with self._lock:
            self._check_id(contact_id, "retrieve")
            return self._get_or_raise(contact_id).model_copy()

    def contains_contact(self, contact_id: object) -> bool:
        with self._lock:
            if _is_blank(contact_id):
                return False
            return contact_id in self._contacts

    def contacts(self) -> tuple[Contact, ...]:
        with self._lock:
            return tuple(contact.model_copy() for contact in self._contacts.values())

    def id_set(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._contacts)

    def count(self) -> int:
        with self._lock:
            return len(self._contacts)

    def remaining_capacity(self) -> int:
        with self._lock:
            return self.capacity - len(self._contacts)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._contacts

    def is_full(self) -> bool:
        with self._lock:
            return len(self._contacts) >= self.capacity

    # section: internals ######################################################
    # everything below expects the caller to hold self._lock

    def _check_id(self, contact_id: Any, operation: str) -> None:
        if contact_id is None:
            raise InvalidArgument(f"contact id cannot be None for operation: {operation}")
        if not isinstance(contact_id, str):
            raise InvalidArgument(
                f"contact id must be a string for operation: {operation}"
            )
        if not contact_id:
            raise InvalidArgument(f"contact id cannot be empty for operation: {operation}")
        if not contact_id.strip():
            raise InvalidArgument(
                f"contact id cannot be whitespace only for operation: {operation}"
            )
        if contact_id != contact_id.strip():
            raise InvalidArgument(
                "contact id cannot have leading or trailing whitespace "
                f"for operation: {operation}"
            )
        if len(contact_id) > MAX_ID_LENGTH:
            raise InvalidArgument(
                f"contact id is too long (max {MAX_ID_LENGTH} characters) "
                f"for operation: {operation}"
            )

    def _check_value(self, value: Any, field_name: str) -> None:
        label = FIELD_LABELS[field_name]
        if value is None:
            raise InvalidArgument(f"{label} cannot be None")
        if _is_blank(value):
            raise InvalidArgument(f"{label} cannot be empty or whitespace only")

    def _get_or_raise(self, contact_id: str) -> Contact:
        try:
            return self._contacts[contact_id]
        except KeyError:
            raise NotFound(f"contact not found with id: {contact_id}")

    def _update_field(self, contact_id: str, field_name: str, value: str) -> None:
        label = FIELD_LABELS[field_name]
        with self._lock:
            self._check_id(contact_id, f"update {label}")
            self._check_value(value, field_name)
            contact = self._get_or_raise(contact_id)
            original = getattr(contact, field_name)
            try:
                setattr(contact, field_name, value)
            except ValidationError as e:
                raise InvalidArgument(
                    f"failed to update {label}: {_describe(e)}"
                ) from e
            except Exception as e:
                log.error(
                    "unexpected error during update",
                    id=contact_id,
                    field=field_name,
                    exception=repr(e),
                )
                self._restore(contact, {field_name: original})
                raise InternalError(f"unexpected error updating {label}") from e
            log.info("contact updated", id=contact_id, fields=[field_name])

    def _restore(self, contact: Contact, snapshot: dict[str, str]) -> None:
        try:
            for name, value in snapshot.items():
                setattr(contact, name, value)
        except Exception as e:
            log.critical(
                "rollback failed",
                id=contact.id,
                fields=list(snapshot),
                exception=repr(e),
            )
            raise RollbackFailed(
                f"critical error: failed to roll back contact {contact.id}"
            ) from e
