import json
from unittest.mock import Mock

import pytest
from anthropic import APIConnectionError, APIStatusError, RateLimitError
from review_relay.executor import (
    OtherFailure,
    RateLimited,
    ReviewExecutor,
    Success,
    is_rate_limit_error,
)

SOURCE = "const x = 1"


def status_error(cls, status_code, message="error"):
    response = Mock()
    response.status_code = status_code
    return cls(message, response=response, body=None)


def make_executor(create=None, text=None):
    client = Mock()
    if create is not None:
        client.messages.create.side_effect = create
    else:
        client.messages.create.return_value = Mock(content=[Mock(text=text)])
    factory = Mock(return_value=client)
    return ReviewExecutor(model="claude-test", timeout=5.0, client_factory=factory), factory, client


def test_rate_limit_error_is_classified():
    """Test the SDK's rate limit error is a throttle."""
    assert is_rate_limit_error(status_error(RateLimitError, 429, "Too many requests"))


def test_status_429_is_classified():
    """Test any 429 status is a throttle."""
    assert is_rate_limit_error(status_error(APIStatusError, 429, "slow down"))


def test_other_status_is_not_classified():
    """Test server errors are not throttles."""
    assert not is_rate_limit_error(status_error(APIStatusError, 500, "Internal error"))


@pytest.mark.parametrize(
    "message",
    ["HTTP 429 from proxy", "Quota exceeded for this key", "Rate limit reached", "rate_limit_error"],
)
def test_message_signatures_are_classified(message):
    """Test errors without a status fall back to message matching."""
    assert is_rate_limit_error(RuntimeError(message))


@pytest.mark.parametrize("message", ["Failed to generate content", "connection reset", "404"])
def test_unrelated_messages_are_not_classified(message):
    """Test ordinary failures are not mistaken for throttling."""
    assert not is_rate_limit_error(RuntimeError(message))


def test_execute_success_parses_fenced_json():
    """Test fenced JSON output becomes a parsed review."""
    body = json.dumps({"score": 5, "summary": "Fine", "improvedCode": "const x = 2"})
    executor, factory, client = make_executor(text=f"```json\n{body}\n```")

    outcome = executor.execute("key-a", "Review this", SOURCE)

    assert isinstance(outcome, Success)
    assert outcome.review.score == 5
    assert outcome.review.improved_code == "const x = 2"
    factory.assert_called_once_with("key-a", timeout=5.0)
    assert client.messages.create.call_args[1]["model"] == "claude-test"


def test_execute_plain_text_gives_degraded_review():
    """Test a non-JSON answer is still a success."""
    executor, _, _ = make_executor(text="Looks fine overall.")

    outcome = executor.execute("key-a", "Review this", SOURCE)

    assert isinstance(outcome, Success)
    assert outcome.review.summary == "Looks fine overall."
    assert outcome.review.score == 7
    assert outcome.review.improved_code == SOURCE


def test_execute_rate_limited():
    """Test throttled calls are reported as RateLimited."""
    error = status_error(RateLimitError, 429, "Rate limit exceeded")
    executor, _, _ = make_executor(create=error)

    outcome = executor.execute("key-a", "Review this", SOURCE)

    assert outcome == RateLimited(error)


def test_execute_other_failure():
    """Test connection problems are reported as OtherFailure."""
    request = Mock()
    request.url = "https://api.anthropic.com/v1/messages"
    error = APIConnectionError(message="Connection failed", request=request)
    executor, _, _ = make_executor(create=error)

    outcome = executor.execute("key-a", "Review this", SOURCE)

    assert isinstance(outcome, OtherFailure)
    assert outcome.error is error


def test_execute_client_creation_failure_is_other_failure():
    """Test a client that cannot be built counts as a failed attempt."""
    factory = Mock(side_effect=RuntimeError("bad key format"))
    executor = ReviewExecutor(client_factory=factory)

    outcome = executor.execute("key-a", "Review this", SOURCE)

    assert isinstance(outcome, OtherFailure)


def test_execute_reuses_client_per_key():
    """Test one client is built per key."""
    executor, factory, _ = make_executor(text="{}")

    executor.execute("key-a", "Review this", SOURCE)
    executor.execute("key-a", "Review this", SOURCE)
    executor.execute("key-b", "Review this", SOURCE)

    assert [c.args[0] for c in factory.call_args_list] == ["key-a", "key-b"]


def test_execute_does_not_catch_keyboard_interrupt():
    """Test that KeyboardInterrupt propagates."""
    executor, _, _ = make_executor(create=KeyboardInterrupt())

    with pytest.raises(KeyboardInterrupt):
        executor.execute("key-a", "Review this", SOURCE)
