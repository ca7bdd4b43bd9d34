"""Tests for configuration constants."""
from review_relay.constants import (
    API_MAX_TOKENS,
    API_TIMEOUT_SECONDS,
    FALLBACK_SCORE,
    FALLBACK_SUMMARY_LENGTH,
    KEY_COOLDOWN_SECONDS,
    KEY_ERROR_WINDOW_SECONDS,
    MAX_KEY_ERROR_COUNT,
    MAX_WAIT_CYCLES,
    WAIT_BASE_SECONDS,
    WAIT_STEP_SECONDS,
)


def test_api_constants_are_positive():
    """Test that API constants have valid positive values."""
    assert API_MAX_TOKENS > 0
    assert isinstance(API_MAX_TOKENS, int)
    assert API_TIMEOUT_SECONDS > 0


def test_rotation_constants():
    """Test the documented rotation defaults."""
    assert KEY_COOLDOWN_SECONDS == 30
    assert MAX_KEY_ERROR_COUNT == 3
    assert KEY_ERROR_WINDOW_SECONDS > KEY_COOLDOWN_SECONDS


def test_wait_schedule_constants():
    """Test waits escalate 45s, 65s, 85s over 3 cycles."""
    assert MAX_WAIT_CYCLES == 3
    waits = [WAIT_BASE_SECONDS + c * WAIT_STEP_SECONDS for c in range(MAX_WAIT_CYCLES)]
    assert waits == [45, 65, 85]


def test_fallback_constants():
    """Test degraded review defaults stay in range."""
    assert 1 <= FALLBACK_SCORE <= 10
    assert FALLBACK_SUMMARY_LENGTH == 500
