"""
Request validation pipeline.

Payloads are sanitized first (strings trimmed, angle brackets removed, applied
recursively), then checked by a per-resource validator returning a
ValidationResult. Stripping angle brackets is a shallow XSS guard, not a
security boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List

from fastapi import Body

from app.core.constants import (
    EMAIL_REGEX,
    OWNER_NAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
    PASSWORD_REGEX,
    PET_NAME_MIN_LENGTH,
    PHONE_OWNER_MIN_LENGTH,
    PHONE_REGEX,
    SPECIES_MIN_LENGTH,
    USERNAME_MIN_LENGTH,
    ZONE_MIN_LENGTH,
    Role,
)
from app.core.exceptions import ValidationException


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


Validator = Callable[[dict], ValidationResult]


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_REGEX.match(email))


def is_valid_password(password) -> bool:
    return isinstance(password, str) and bool(PASSWORD_REGEX.match(password))


def is_valid_phone(phone) -> bool:
    return isinstance(phone, str) and bool(PHONE_REGEX.match(phone))


def sanitize_string(value) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, list):
        return [_sanitize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _sanitize_value(item) for key, item in value.items()}
    return value


def sanitize_object(obj: Any) -> dict:
    """Sanitize every string inside a JSON object. A non-object top level becomes {}."""
    if not isinstance(obj, dict):
        return {}
    return _sanitize_value(obj)


def _min_length(value, length: int) -> bool:
    return isinstance(value, str) and len(value) >= length


def _is_user_type(value) -> bool:
    # bool is an int subclass; reject it explicitly
    return isinstance(value, int) and not isinstance(value, bool) and value in (Role.ADMIN, Role.PET_OWNER)


def validate_user_registration(data: dict) -> ValidationResult:
    result = ValidationResult()

    if not _min_length(data.get("username"), USERNAME_MIN_LENGTH):
        result.errors.append(f"El nombre de usuario debe tener al menos {USERNAME_MIN_LENGTH} caracteres")

    if not is_valid_email(data.get("email")):
        result.errors.append("Email inválido")

    if not is_valid_password(data.get("password")):
        result.errors.append(f"La contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres")

    if data.get("userType") is not None and not _is_user_type(data["userType"]):
        result.errors.append("Tipo de usuario inválido")

    return result


def validate_login_data(data: dict) -> ValidationResult:
    result = ValidationResult()

    if not is_valid_email(data.get("email")):
        result.errors.append("Email inválido")

    password = data.get("password")
    if not isinstance(password, str) or not password.strip():
        result.errors.append("Contraseña requerida")

    return result


def validate_user_update(data: dict) -> ValidationResult:
    """Partial update: only the provided fields are checked."""
    result = ValidationResult()

    if "username" in data and not _min_length(data["username"], USERNAME_MIN_LENGTH):
        result.errors.append(f"El nombre de usuario debe tener al menos {USERNAME_MIN_LENGTH} caracteres")

    if "email" in data and not is_valid_email(data["email"]):
        result.errors.append("Email inválido")

    if data.get("password") and not is_valid_password(data["password"]):
        result.errors.append(f"La contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres")

    if "userType" in data and not _is_user_type(data["userType"]):
        result.errors.append("Tipo de usuario inválido")

    return result


def _validate_pet_fields(data: dict, result: ValidationResult) -> None:
    if not _min_length(data.get("name"), PET_NAME_MIN_LENGTH):
        result.errors.append(f"El nombre de la mascota debe tener al menos {PET_NAME_MIN_LENGTH} caracteres")

    if not _min_length(data.get("owner"), OWNER_NAME_MIN_LENGTH):
        result.errors.append(f"El nombre del propietario debe tener al menos {OWNER_NAME_MIN_LENGTH} caracteres")

    if not _min_length(data.get("species"), SPECIES_MIN_LENGTH):
        result.errors.append(f"La especie debe tener al menos {SPECIES_MIN_LENGTH} caracteres")

    if not _min_length(data.get("zone"), ZONE_MIN_LENGTH):
        result.errors.append(f"La zona debe tener al menos {ZONE_MIN_LENGTH} caracteres")

    if not data.get("birthdate"):
        result.errors.append("La fecha de nacimiento es requerida")

    phones = data.get("phone")
    if not isinstance(phones, list) or not phones:
        result.errors.append("Debe proporcionar al menos un número de teléfono")
        return

    for index, entry in enumerate(phones, start=1):
        if not isinstance(entry, dict):
            result.errors.append(f"El número de teléfono {index} no es válido")
            continue
        if not _min_length(entry.get("owner"), PHONE_OWNER_MIN_LENGTH):
            result.errors.append(
                f"El propietario del teléfono {index} debe tener al menos {PHONE_OWNER_MIN_LENGTH} caracteres"
            )
        if not is_valid_phone(entry.get("number")):
            result.errors.append(f"El número de teléfono {index} no es válido")


def validate_pet_data(data: dict) -> ValidationResult:
    result = ValidationResult()
    # Phone entries are new on create: drop any client-sent _id
    for entry in data.get("phone") or []:
        if isinstance(entry, dict):
            entry.pop("_id", None)
    _validate_pet_fields(data, result)
    return result


def validate_pet_update(data: dict) -> ValidationResult:
    result = ValidationResult()
    _validate_pet_fields(data, result)
    return result


def validated_body(validator: Validator):
    """
    Dependency factory: sanitize the JSON body, run `validator` and raise a
    single 400 carrying every message joined by ", " when it fails.
    """

    def dependency(payload: Any = Body(default=None)) -> dict:
        sanitized = sanitize_object(payload)
        validation = validator(sanitized)
        if not validation.is_valid:
            raise ValidationException(", ".join(validation.errors))
        return sanitized

    return dependency
