"""Single review attempt with one API key."""
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from anthropic import APIStatusError, RateLimitError

from review_relay.api_client import create_client, request_review_with_client
from review_relay.constants import API_TIMEOUT_SECONDS, DEFAULT_MODEL
from review_relay.models import ReviewResult
from review_relay.processor import parse_review

# Fallback for errors without a structured status, e.g. from a proxy.
# \brate avoids matching words like "generate".
RATE_LIMIT_PATTERN = re.compile(r"\b429\b|quota|\brate", re.IGNORECASE)


@dataclass(frozen=True)
class Success:
    review: ReviewResult


@dataclass(frozen=True)
class RateLimited:
    error: Exception


@dataclass(frozen=True)
class OtherFailure:
    error: Exception


AttemptOutcome = Union[Success, RateLimited, OtherFailure]


def is_rate_limit_error(error: Exception) -> bool:
    """Check whether a provider error means the key is throttled.

    Args:
        error: Exception raised by the provider call

    Returns:
        True for 429 responses or errors whose message mentions rate or quota
    """
    if isinstance(error, RateLimitError):
        return True
    if isinstance(error, APIStatusError) and error.status_code == 429:
        return True
    return bool(RATE_LIMIT_PATTERN.search(str(error)))


class ReviewExecutor:
    """Issues one review request and classifies the result."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        timeout: float = API_TIMEOUT_SECONDS,
        client_factory: Callable[..., Any] = create_client,
    ):
        """Initialize executor.

        Args:
            model: Model identifier sent with every request
            timeout: Per-request timeout in seconds
            client_factory: Builds a client from (api_key, timeout=...)
        """
        self.model = model
        self.timeout = timeout
        self._client_factory = client_factory
        self._clients: dict[str, Any] = {}

    def _client_for(self, credential: str) -> Any:
        client = self._clients.get(credential)
        if client is None:
            client = self._client_factory(credential, timeout=self.timeout)
            self._clients[credential] = client
        return client

    def execute(self, credential: str, prompt: str, source_code: str) -> AttemptOutcome:
        """Run one attempt.

        Malformed response text is not a failure: it is parsed into a
        degraded review instead.

        Args:
            credential: API key to use
            prompt: Review prompt
            source_code: Submitted code, needed for the degraded review

        Returns:
            Success, RateLimited or OtherFailure
        """
        try:
            text = request_review_with_client(self._client_for(credential), prompt, model=self.model)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            if is_rate_limit_error(e):
                return RateLimited(e)
            return OtherFailure(e)

        return Success(parse_review(text, source_code))
