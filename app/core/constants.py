"""Shared constants: roles, validation rules and user-facing messages."""

import re
from enum import IntEnum


class Role(IntEnum):
    ADMIN = 1
    PET_OWNER = 2


# Validation rules
PASSWORD_MIN_LENGTH = 4
USERNAME_MIN_LENGTH = 3
PET_NAME_MIN_LENGTH = 2
OWNER_NAME_MIN_LENGTH = 2
SPECIES_MIN_LENGTH = 2
ZONE_MIN_LENGTH = 2
PHONE_OWNER_MIN_LENGTH = 2

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_REGEX = re.compile(r"^.{4,}$")
PHONE_REGEX = re.compile(r"^\+?[\d\s\-\(\)]+$")
OBJECT_ID_REGEX = re.compile(r"^[0-9a-fA-F]{24}$")

# Public short id (URL-friendly alphabet)
UNIQUE_ID_LENGTH = 10
UNIQUE_ID_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

SYSTEM_ACTOR = "Sistema"
UNKNOWN = "unknown"


class ErrorMessages:
    UNAUTHORIZED = "No autorizado"
    AUTH_REQUIRED = "Autenticación requerida"
    TOKEN_REQUIRED = "Token de acceso requerido"
    INVALID_TOKEN = "Token inválido"
    FORBIDDEN = "Acceso denegado"
    INSUFFICIENT_PERMISSIONS = "Permisos insuficientes"
    INVALID_USER_TYPE = "Tipo de usuario inválido"
    NOT_FOUND = "Recurso no encontrado"
    VALIDATION_ERROR = "Error de validación"
    INTERNAL_ERROR = "Error interno del servidor"
    INVALID_CREDENTIALS = "Credenciales inválidas"
    USER_NOT_FOUND = "Usuario no encontrado"
    USER_EXISTS = "El usuario ya existe"
    RESOURCE_EXISTS = "El recurso ya existe"
    PET_NOT_FOUND = "Mascota no encontrada"
    ENDPOINT_NOT_FOUND = "Endpoint no encontrado"
    OWNER_NOT_FOUND = "El propietario especificado no existe"
    ONLY_OWN_PROFILE = "Solo puedes actualizar tu propio perfil"
    ONLY_ADMIN_ROLE_CHANGE = "Solo un administrador puede cambiar el tipo de usuario"
    ONLY_ADMIN_CREATES_ADMIN = "Solo un administrador puede registrar administradores"
    ONLY_EDIT_OWN_PETS = "Solo puedes editar tus propias mascotas"
    ONLY_VIEW_OWN_PETS = "Solo puedes ver tus propias mascotas"
    QR_GENERATION_FAILED = "Error generando código QR"
    RATE_LIMIT_EXCEEDED = "Demasiadas solicitudes, intente más tarde"
    AUTH_RATE_LIMIT_EXCEEDED = "Demasiados intentos de autenticación, intente más tarde"
    CREATE_RATE_LIMIT_EXCEEDED = "Demasiadas solicitudes de creación, intente más tarde"


class SuccessMessages:
    CREATED = "Creado exitosamente"
    UPDATED = "Actualizado exitosamente"
    DELETED = "Eliminado exitosamente"
    LOGIN_SUCCESS = "Login exitoso"
    REGISTER_SUCCESS = "Registro exitoso"
