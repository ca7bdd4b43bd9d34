"""Input validation functions."""
from typing import Any

from review_relay.errors import ConfigurationError, ValidationError


def validate_review_request(code: Any, language: Any) -> None:
    """Validate that a review request carries code and a language.

    Args:
        code: Submitted source code
        language: Language identifier

    Raises:
        ValidationError: If either value is missing or blank
    """
    if not isinstance(code, str) or not code.strip():
        raise ValidationError("Code and language are required")
    if not isinstance(language, str) or not language.strip():
        raise ValidationError("Code and language are required")


def validate_port(port: int) -> None:
    """Validate TCP port number.

    Args:
        port: Port to validate

    Raises:
        ConfigurationError: If port is outside 1-65535
    """
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port must be between 1 and 65535, got: {port}")


def validate_non_negative(name: str, value: float) -> None:
    """Validate a timing or count setting.

    Args:
        name: Setting name used in the error message
        value: Value to validate

    Raises:
        ConfigurationError: If value is negative
    """
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got: {value}")


def validate_positive(name: str, value: float) -> None:
    """Validate a setting that must be strictly positive.

    Args:
        name: Setting name used in the error message
        value: Value to validate

    Raises:
        ConfigurationError: If value is zero or negative
    """
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")
