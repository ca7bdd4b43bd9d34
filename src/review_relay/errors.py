"""Exception types raised by review-relay."""


class ReviewRelayError(Exception):
    """Base class for review-relay errors."""


class ConfigurationError(ReviewRelayError):
    """Service is misconfigured, e.g. no API keys are available."""


class ValidationError(ReviewRelayError, ValueError):
    """Review request is missing required input."""


class ReviewParseError(ReviewRelayError, ValueError):
    """Provider response text could not be turned into a review."""


class CredentialsExhaustedError(ReviewRelayError):
    """Every key failed in every wait cycle.

    Attributes:
        last_error: Last failure observed from the provider
        keys_available: Number of configured keys
    """

    def __init__(self, last_error: Exception | None, keys_available: int):
        self.last_error = last_error
        self.keys_available = keys_available
        detail = str(last_error) if last_error is not None else "no attempts were made"
        super().__init__(
            f"All {keys_available} API key(s) failed after all wait cycles: {detail}"
        )
