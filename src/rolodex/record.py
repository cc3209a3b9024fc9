import re
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

ID_MAX_LENGTH = 10
NAME_MAX_LENGTH = 10
ADDRESS_MAX_LENGTH = 30
PHONE_LENGTH = 10

# fields that may change after construction, in update order
UPDATABLE_FIELDS = ("first_name", "last_name", "phone", "address")

FIELD_LABELS = {
    "id": "contact id",
    "first_name": "first name",
    "last_name": "last name",
    "phone": "phone number",
    "address": "address",
}

_MAX_LENGTHS = {
    "id": ID_MAX_LENGTH,
    "first_name": NAME_MAX_LENGTH,
    "last_name": NAME_MAX_LENGTH,
    "address": ADDRESS_MAX_LENGTH,
}

_DIGITS = re.compile(r"[0-9]+")


class Contact(BaseModel):
    """
    A single contact.

    Every field is validated on construction and again on each assignment,
    a rejected assignment leaves the contact exactly as it was.
    `id` is frozen once the contact exists.

    Values are stored as given, without trimming.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid", strict=True)

    id: str = Field(frozen=True)
    first_name: str
    last_name: str
    phone: str
    address: str

    @field_validator("id", "first_name", "last_name", "address")
    @classmethod
    def check_length(cls, value: str, info: ValidationInfo) -> str:
        label = FIELD_LABELS[info.field_name]
        limit = _MAX_LENGTHS[info.field_name]
        if not value:
            raise ValueError(f"{label} cannot be empty")
        if len(value) > limit:
            raise ValueError(f"{label} cannot exceed {limit} characters")
        return value

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        # length is checked before the character class
        if not value:
            raise ValueError("phone number cannot be empty")
        if len(value) != PHONE_LENGTH:
            raise ValueError(f"phone number must be exactly {PHONE_LENGTH} digits")
        if not _DIGITS.fullmatch(value):
            raise ValueError("phone number must contain only digits")
        return value
