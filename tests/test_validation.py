import pytest
from review_relay.errors import ConfigurationError, ValidationError
from review_relay.validation import (
    validate_non_negative,
    validate_port,
    validate_positive,
    validate_review_request,
)


def test_validate_review_request_valid():
    """Test a request with code and language passes."""
    validate_review_request("x = 1", "python")  # Should not raise


@pytest.mark.parametrize(
    "code,language",
    [(None, "python"), ("x = 1", None), ("", "python"), ("x = 1", "  "), (42, "python")],
)
def test_validate_review_request_invalid(code, language):
    """Test missing, blank or non-string input is rejected."""
    with pytest.raises(ValidationError, match="Code and language are required"):
        validate_review_request(code, language)


def test_validation_error_is_value_error():
    """Test callers catching ValueError also see request errors."""
    with pytest.raises(ValueError):
        validate_review_request("", "")


def test_validate_port():
    """Test port range checks."""
    validate_port(5000)  # Should not raise

    with pytest.raises(ConfigurationError, match="Port"):
        validate_port(0)
    with pytest.raises(ConfigurationError, match="Port"):
        validate_port(65536)


def test_validate_non_negative():
    """Test zero is allowed, negatives are not."""
    validate_non_negative("wait", 0)

    with pytest.raises(ConfigurationError, match="wait must not be negative"):
        validate_non_negative("wait", -1)


def test_validate_positive():
    """Test zero is rejected."""
    validate_positive("timeout", 0.5)

    with pytest.raises(ConfigurationError, match="timeout must be positive"):
        validate_positive("timeout", 0)
