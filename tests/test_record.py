import pytest
from pydantic import ValidationError
from rolodex import Contact
from testdata import john


def test_contact_fields_round_trip():
    c = john()
    assert c.id == "12345"
    assert c.first_name == "John"
    assert c.last_name == "Doe"
    assert c.phone == "1234567890"
    assert c.address == "123 Main St"


def test_contact_max_lengths():
    c = Contact(
        id="1234567890",
        first_name="Johnathan1",
        last_name="Washington",
        phone="0000000000",
        address="a" * 30,
    )
    assert c.id == "1234567890"
    assert c.address == "a" * 30


def test_contact_min_lengths():
    c = Contact(id="1", first_name="J", last_name="D", phone="1111111111", address="A")
    assert c.first_name == "J"


def test_contact_values_not_trimmed():
    c = john(first_name=" John ", address="  spaced  ")
    assert c.first_name == " John "
    assert c.address == "  spaced  "


def test_contact_whitespace_only_accepted():
    # blank values are only rejected by the registry
    c = john(id="   ", first_name="   ")
    assert c.id == "   "
    assert c.first_name == "   "


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("id", "", "contact id cannot be empty"),
        ("id", "12345678901", "contact id cannot exceed 10 characters"),
        ("first_name", "", "first name cannot be empty"),
        ("first_name", "Christopher", "first name cannot exceed 10 characters"),
        ("last_name", "", "last name cannot be empty"),
        ("last_name", "x" * 50, "last name cannot exceed 10 characters"),
        ("phone", "", "phone number cannot be empty"),
        ("phone", "123456789", "phone number must be exactly 10 digits"),
        ("phone", "12345678901", "phone number must be exactly 10 digits"),
        ("phone", "123abc7890", "phone number must contain only digits"),
        ("phone", "123-456-78", "phone number must contain only digits"),
        ("address", "", "address cannot be empty"),
        ("address", "a" * 31, "address cannot exceed 30 characters"),
    ],
)
def test_contact_invalid_field(field, value, message):
    with pytest.raises(ValidationError) as exc:
        john(**{field: value})
    assert message in str(exc.value)


@pytest.mark.parametrize(
    "field", ["id", "first_name", "last_name", "phone", "address"]
)
def test_contact_none_field(field):
    with pytest.raises(ValidationError):
        john(**{field: None})


def test_contact_missing_field():
    with pytest.raises(ValidationError):
        Contact(id="12345", first_name="John", last_name="Doe", phone="1234567890")


def test_contact_non_string_phone():
    with pytest.raises(ValidationError):
        john(phone=1234567890)


def test_contact_extra_field():
    with pytest.raises(ValidationError):
        john(email="john@example.com")


def test_contact_short_non_numeric_phone_reports_length():
    with pytest.raises(ValidationError) as exc:
        john(phone="abc")
    assert "exactly 10 digits" in str(exc.value)
    assert "only digits" not in str(exc.value)


def test_contact_non_ascii_digits_rejected():
    with pytest.raises(ValidationError) as exc:
        john(phone="١٢٣٤٥٦٧٨٩٠")
    assert "only digits" in str(exc.value)


@pytest.mark.parametrize(
    "field,value",
    [
        ("first_name", "Jane"),
        ("last_name", "Smith"),
        ("phone", "0987654321"),
        ("address", "456 Oak Avenue"),
    ],
)
def test_contact_setter_good(field, value):
    c = john()
    setattr(c, field, value)
    assert getattr(c, field) == value


@pytest.mark.parametrize(
    "field,value",
    [
        ("first_name", None),
        ("first_name", ""),
        ("first_name", "Christopher"),
        ("last_name", "Williamsons"),
        ("phone", "12345"),
        ("phone", "123abc7890"),
        ("phone", None),
        ("address", ""),
        ("address", "a" * 31),
    ],
)
def test_contact_failed_setter_changes_nothing(field, value):
    c = john()
    before = c.model_dump()
    with pytest.raises(ValidationError):
        setattr(c, field, value)
    assert c.model_dump() == before


def test_contact_id_frozen():
    c = john()
    with pytest.raises(ValidationError):
        c.id = "67890"
    assert c.id == "12345"


def test_contact_equality():
    assert john() == john()
    assert john() != john(first_name="Jane")
