"""
Identity format rules.

nationalId is 12 ASCII digits; taxId is a PAN (five letters, four digits,
one letter). Vehicle registrations are compared upper-cased and trimmed.
"""

import re

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from core.exceptions import ValidationError

NATIONAL_ID_PATTERN = re.compile(r"[0-9]{12}")
TAX_ID_PATTERN = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")


def normalize_registration(registration_number):
    return (registration_number or "").strip().upper()


def normalize_tax_id(tax_id):
    return (tax_id or "").strip().upper()


def validate_national_id(national_id):
    if not national_id or not NATIONAL_ID_PATTERN.fullmatch(national_id):
        raise ValidationError(
            "nationalId must be exactly 12 digits", {"field": "nationalId"}
        )
    return national_id


def validate_tax_id(tax_id):
    if not tax_id or not TAX_ID_PATTERN.fullmatch(tax_id):
        raise ValidationError(
            "taxId must match format AAAAA9999A", {"field": "taxId"}
        )
    return tax_id


def validate_optional_email(email):
    if not email:
        return None
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError("Invalid email address", {"field": "email"})
    return email


def require_text(value, field):
    if not value or not str(value).strip():
        raise ValidationError(f"{field} must be non-empty", {"field": field})
    return str(value).strip()
