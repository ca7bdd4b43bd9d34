"""API key pool and per-key health tracking.

State is process-lifetime and in memory only. Mutations are plain field
updates with no locking; concurrent requests may race on the same key.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field

from review_relay.constants import KEY_ERROR_WINDOW_SECONDS, KEY_SUFFIX_LENGTH
from review_relay.errors import ConfigurationError


def load_credentials(raw: str | Iterable[str] | None) -> list[str]:
    """Parse configured API keys.

    Args:
        raw: Comma-separated string or iterable of keys

    Returns:
        Keys in configured order, whitespace stripped, blanks dropped
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [key.strip() for key in raw if key and key.strip()]


def mask_credential(credential: str) -> str:
    """Return a log-safe form of a key: '...' plus its last characters."""
    return f"...{credential[-KEY_SUFFIX_LENGTH:]}"


@dataclass
class CredentialState:
    """Usage and health of one key."""
    last_used_at: float = 0.0
    error_times: list[float] = field(default_factory=list)

    def error_count(self, now: float, window: float) -> int:
        """Number of failures recorded within the last `window` seconds."""
        return sum(1 for t in self.error_times if now - t < window)


class CredentialPool:
    """Fixed, ordered set of keys plus their state and the rotation cursor."""

    def __init__(
        self, credentials: Iterable[str], error_window_seconds: float = KEY_ERROR_WINDOW_SECONDS
    ):
        """Initialize pool.

        Args:
            credentials: Keys in rotation order
            error_window_seconds: How long a failure counts against a key
        """
        self._credentials = tuple(credentials)
        self._states: dict[str, CredentialState] = {}
        self.error_window_seconds = error_window_seconds
        self.cursor = 0

    @property
    def credentials(self) -> tuple[str, ...]:
        return self._credentials

    def __len__(self) -> int:
        return len(self._credentials)

    def require_credentials(self) -> None:
        """Raise ConfigurationError if no keys are configured."""
        if not self._credentials:
            raise ConfigurationError(
                "No API keys configured. Set REVIEW_RELAY_API_KEYS to a "
                "comma-separated list of keys."
            )

    def get_state(self, credential: str) -> CredentialState:
        """Get state for a key, creating the default state on first access."""
        state = self._states.get(credential)
        if state is None:
            state = CredentialState()
            self._states[credential] = state
        return state

    def last_used_at(self, credential: str) -> float:
        return self.get_state(credential).last_used_at

    def error_count(self, credential: str, now: float) -> int:
        return self.get_state(credential).error_count(now, self.error_window_seconds)

    def mark_used(self, credential: str, now: float) -> None:
        state = self.get_state(credential)
        state.last_used_at = max(state.last_used_at, now)

    def record_error(self, credential: str, now: float) -> None:
        """Record a failed attempt, dropping failures that have aged out."""
        state = self.get_state(credential)
        state.error_times = [
            t for t in state.error_times if now - t < self.error_window_seconds
        ]
        state.error_times.append(now)

    def reset_errors(self, credential: str) -> None:
        self.get_state(credential).error_times = []

    def advance_cursor(self) -> None:
        """Move the rotation start past the current position."""
        if self._credentials:
            self.cursor = (self.cursor + 1) % len(self._credentials)

    def reset_all(self) -> None:
        """Clear errors and last-used times of every key."""
        for credential in self._credentials:
            state = self.get_state(credential)
            state.error_times = []
            state.last_used_at = 0.0
