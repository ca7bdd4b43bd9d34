"""Cooldown-aware key rotation."""
from review_relay.constants import KEY_COOLDOWN_SECONDS, MAX_KEY_ERROR_COUNT
from review_relay.credentials import CredentialPool


def select_credential(
    pool: CredentialPool,
    now: float,
    cooldown_seconds: float = KEY_COOLDOWN_SECONDS,
    max_error_count: int = MAX_KEY_ERROR_COUNT,
) -> str:
    """Pick the next key to try.

    Scans from the pool cursor, wrapping around, for the first key with
    fewer than `max_error_count` recent errors that has not been used within
    `cooldown_seconds`. The cursor moves to that key. If every key is
    excluded, the least recently used key is returned (first in pool order
    on ties) and the cursor is left alone, so a request always makes
    progress.

    Args:
        pool: Key pool
        now: Current time in seconds
        cooldown_seconds: Minimum time since a key's last use
        max_error_count: Recent-error count at which a key is skipped

    Returns:
        Selected key

    Raises:
        ConfigurationError: If the pool is empty
    """
    pool.require_credentials()
    credentials = pool.credentials
    size = len(credentials)

    for offset in range(size):
        index = (pool.cursor + offset) % size
        credential = credentials[index]
        if (
            pool.error_count(credential, now) < max_error_count
            and now - pool.last_used_at(credential) > cooldown_seconds
        ):
            pool.cursor = index
            return credential

    return min(credentials, key=pool.last_used_at)
