from quotewizard.application.utils.field_validation import is_form_complete, validate_field, validate_fields
from quotewizard.domain.entities.step_definition import FieldDescriptor, ValidatorKind


def test_required_text():
    field = FieldDescriptor(id="firstName", required=True, validator=ValidatorKind.text)

    assert validate_field(field, "  ") == "This field is required."
    assert validate_field(field, "Sam") == ""


def test_email_and_phone():
    email = FieldDescriptor(id="email", required=True, validator=ValidatorKind.email)
    phone = FieldDescriptor(id="phone", required=True, validator=ValidatorKind.phone)

    assert validate_field(email, "") == "Enter your email address."
    assert validate_field(email, "sam@example") == "Enter a valid email address."
    assert validate_field(email, "sam@example.com") == ""
    assert validate_field(phone, "12ab") == "Enter a valid phone number."
    assert validate_field(phone, "+61 (08) 9000-0000") == ""


def test_optional_postcode_only_checked_when_present():
    postcode = FieldDescriptor(id="postcode", required=False, validator=ValidatorKind.postcode)

    assert validate_field(postcode, "") == ""
    assert validate_field(postcode, "60") == "Enter a valid postcode."
    assert validate_field(postcode, "6000") == ""


def test_form_completeness_ignores_optional_fields():
    fields = (
        FieldDescriptor(id="state", required=True, validator=ValidatorKind.state),
        FieldDescriptor(id="notes", required=False),
    )

    assert is_form_complete(fields, {}) is False
    assert validate_fields(fields, {}) == {"state": "Select your state."}
    assert is_form_complete(fields, {"state": "WA"}) is True
