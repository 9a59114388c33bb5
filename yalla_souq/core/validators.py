"""Form validation for login, signup and listing forms.

Each field validator takes the submitted form (a dict) and returns an Arabic
error message, or None when the field is valid. ``validate_form`` runs a
schema and collects the failures; an empty result means the form is valid.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from yalla_souq.utils.helpers import is_valid_email, is_valid_palestinian_phone

FieldValidator = Callable[[Mapping[str, Any]], str | None]

# =============================================================================
# Constants
# =============================================================================

MIN_PASSWORD_LENGTH: int = 6
MIN_NAME_LENGTH: int = 2
MIN_TITLE_LENGTH: int = 3
MIN_DESCRIPTION_LENGTH: int = 10

# =============================================================================
# Field validators
# =============================================================================


def _email(form: Mapping[str, Any]) -> str | None:
    value = form.get("email") or ""
    if not value:
        return "يرجى إدخال البريد الإلكتروني"
    if not is_valid_email(value):
        return "يرجى إدخال عنوان بريد إلكتروني صحيح"
    return None


def _password(form: Mapping[str, Any]) -> str | None:
    value = form.get("password") or ""
    if not value:
        return "يرجى إدخال كلمة المرور"
    if len(value) < MIN_PASSWORD_LENGTH:
        return "كلمة المرور يجب أن تكون 6 أحرف على الأقل"
    return None


def _first_name(form: Mapping[str, Any]) -> str | None:
    value = form.get("first_name") or ""
    if not value:
        return "يرجى إدخال الاسم الأول"
    if len(value) < MIN_NAME_LENGTH:
        return "الاسم يجب أن يكون على الأقل حرفين"
    return None


def _last_name(form: Mapping[str, Any]) -> str | None:
    value = form.get("last_name") or ""
    if not value:
        return "يرجى إدخال اسم العائلة"
    if len(value) < MIN_NAME_LENGTH:
        return "اسم العائلة يجب أن يكون على الأقل حرفين"
    return None


def _phone(form: Mapping[str, Any]) -> str | None:
    value = form.get("phone") or ""
    if value and not is_valid_palestinian_phone(value):
        return "يرجى إدخال رقم هاتف فلسطيني صحيح (مثال: 0599123456)"
    return None


def _confirm_password(form: Mapping[str, Any]) -> str | None:
    value = form.get("confirm_password") or ""
    if not value:
        return "يرجى تأكيد كلمة المرور"
    if value != form.get("password"):
        return "كلمات المرور غير متطابقة"
    return None


def _title(form: Mapping[str, Any]) -> str | None:
    value = form.get("title") or ""
    if not value:
        return "يرجى إدخال عنوان المنتج"
    if len(value) < MIN_TITLE_LENGTH:
        return "العنوان يجب أن يكون 3 أحرف على الأقل"
    return None


def _description(form: Mapping[str, Any]) -> str | None:
    value = form.get("description") or ""
    if not value:
        return "يرجى إدخال وصف المنتج"
    if len(value) < MIN_DESCRIPTION_LENGTH:
        return "الوصف يجب أن يكون 10 أحرف على الأقل"
    return None


def _price(form: Mapping[str, Any]) -> str | None:
    # Form fields arrive as strings or numbers
    try:
        value = float(form.get("price"))
    except (TypeError, ValueError):
        return "السعر يجب أن يكون أكبر من صفر"
    if not value > 0:
        return "السعر يجب أن يكون أكبر من صفر"
    return None


def _category(form: Mapping[str, Any]) -> str | None:
    if not form.get("category"):
        return "يرجى اختيار الفئة"
    return None


# =============================================================================
# Schemas
# =============================================================================

LOGIN_SCHEMA: Mapping[str, FieldValidator] = MappingProxyType(
    {"email": _email, "password": _password}
)

SIGNUP_SCHEMA: Mapping[str, FieldValidator] = MappingProxyType(
    {
        "first_name": _first_name,
        "last_name": _last_name,
        "email": _email,
        "phone": _phone,
        "password": _password,
        "confirm_password": _confirm_password,
    }
)

PRODUCT_SCHEMA: Mapping[str, FieldValidator] = MappingProxyType(
    {
        "title": _title,
        "description": _description,
        "price": _price,
        "category": _category,
    }
)


def validate_form(data: Mapping[str, Any], schema: Mapping[str, FieldValidator]) -> dict[str, str]:
    """Run every validator in ``schema`` against ``data``.

    Returns:
        Mapping of field name to error message for the fields that failed
    """
    errors: dict[str, str] = {}
    for field_name, validator in schema.items():
        error = validator(data)
        if error:
            errors[field_name] = error
    return errors


def validate_login(data: Mapping[str, Any]) -> dict[str, str]:
    return validate_form(data, LOGIN_SCHEMA)


def validate_signup(data: Mapping[str, Any]) -> dict[str, str]:
    return validate_form(data, SIGNUP_SCHEMA)


def validate_product(data: Mapping[str, Any]) -> dict[str, str]:
    return validate_form(data, PRODUCT_SCHEMA)
