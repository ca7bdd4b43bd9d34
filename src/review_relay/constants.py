"""Configuration constants for review-relay.

This module centralizes magic numbers used throughout the codebase
with clear documentation for why each value was chosen. Every value
here is a default; ``config.load_config`` can override most of them.
"""

# API Client Settings
# ------------------

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
"""Model used for code reviews unless REVIEW_RELAY_MODEL overrides it."""

API_MAX_TOKENS = 8192
"""Maximum tokens for review responses.

Value: 8192
Rationale: A review carries the full improved code next to the findings,
so responses for medium-sized files can pass 4000 tokens.
"""

API_TIMEOUT_SECONDS = 60.0
"""Per-request timeout for the provider client.

Value: 60.0
Rationale: Reviews of large files take 20-40s to generate. A hung
connection should fail the attempt so the next key can be tried.
"""

# Credential Rotation Settings
# ---------------------------

KEY_COOLDOWN_SECONDS = 30.0
"""Minimum time between two uses of the same key by the primary rule.

Value: 30.0
Rationale: Free-tier keys allow only a handful of requests per minute.
Spreading consecutive requests over the pool keeps each key under that.
"""

MAX_KEY_ERROR_COUNT = 3
"""Recent failures after which a key is skipped by the primary rule.

Value: 3
"""

KEY_ERROR_WINDOW_SECONDS = 120.0
"""How long a recorded failure counts against a key.

Value: 120.0
Rationale: Provider rate-limit windows are about a minute. Two minutes
lets a throttled key recover without being retried too early.
"""

KEY_SUFFIX_LENGTH = 6
"""Number of trailing key characters shown in logs and responses."""

# Retry Settings
# -------------

MAX_WAIT_CYCLES = 3
"""Number of times to wait and sweep the whole pool again.

Value: 3
Rationale: With the wait schedule below, 3 cycles add up to 195s of
waiting, enough for several per-minute quota windows to reset.
"""

WAIT_BASE_SECONDS = 45.0
"""Wait after the first exhausted sweep.

Value: 45.0
"""

WAIT_STEP_SECONDS = 20.0
"""Extra wait added for each further cycle.

Value: 20.0
Delays: 45s -> 65s -> 85s.
"""

# Response Parsing Settings
# ------------------------

FALLBACK_SUMMARY_LENGTH = 500
"""Characters of raw response text kept when the response is not JSON."""

FALLBACK_SCORE = 7
"""Score reported for reviews that could not be parsed."""

FALLBACK_POSITIVES = ("Code submitted for review",)
"""Positives reported for reviews that could not be parsed."""

# HTTP Settings
# ------------

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000

DEFAULT_RATE_LIMIT = "30/minute"
"""Inbound request limit per client address on /api routes.

Value: 30/minute
Rationale: Several keys are rotated, so the service can take more traffic
than a single key allows, but one client should not drain the whole pool.
"""

RATE_LIMIT_RETRY_AFTER_SECONDS = 60
"""Retry-after hint returned with inbound 429 responses."""
