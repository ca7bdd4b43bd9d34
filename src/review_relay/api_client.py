"""Anthropic API client wrapper."""
from typing import Any

from anthropic import (
    Anthropic,
    APIConnectionError,
    APIError,
    APITimeoutError,
    RateLimitError,
)

from review_relay.constants import API_MAX_TOKENS, API_TIMEOUT_SECONDS, DEFAULT_MODEL
from review_relay.logging_config import get_logger

logger = get_logger(__name__)


def create_client(api_key: str, timeout: float = API_TIMEOUT_SECONDS) -> Anthropic:
    """Create an Anthropic client for one API key.

    Args:
        api_key: Anthropic API key
        timeout: Request timeout in seconds

    Returns:
        Client instance
    """
    # Retries are driven by key rotation, not by the SDK
    return Anthropic(api_key=api_key, timeout=timeout, max_retries=0)


def request_review_with_client(
    client: Any, prompt: str, model: str = DEFAULT_MODEL
) -> str:
    """Send a review prompt and return the response text.

    Args:
        client: Anthropic client
        prompt: Review prompt
        model: Model identifier

    Returns:
        Response text

    Raises:
        ValueError: If prompt is empty or the response has no text
        APIError: If the API call fails (includes connection, rate limit, etc.)
    """
    if not prompt or not isinstance(prompt, str) or not prompt.strip():
        raise ValueError("prompt must be a non-empty string")

    try:
        response = client.messages.create(
            model=model,
            max_tokens=API_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
    except APITimeoutError:
        logger.error("API request timed out")
        raise
    except APIConnectionError as e:
        logger.error(f"API connection failed: {e}")
        raise
    except RateLimitError as e:
        # Expected under load, the caller rotates keys
        logger.warning(f"Rate limit hit: {e}")
        raise
    except APIError as e:
        logger.error(f"API error: {e}")
        raise

    if not response.content:
        raise ValueError("API returned empty response content")

    return response.content[0].text
