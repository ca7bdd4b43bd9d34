"""Key rotation with wait cycles around review attempts."""
import time
from collections.abc import Callable
from dataclasses import dataclass

from review_relay.constants import (
    KEY_COOLDOWN_SECONDS,
    MAX_KEY_ERROR_COUNT,
    MAX_WAIT_CYCLES,
    WAIT_BASE_SECONDS,
    WAIT_STEP_SECONDS,
)
from review_relay.credentials import CredentialPool, mask_credential
from review_relay.errors import CredentialsExhaustedError
from review_relay.executor import RateLimited, ReviewExecutor, Success
from review_relay.logging_config import get_logger
from review_relay.models import ReviewRequest, ReviewResult
from review_relay.processor import build_review_prompt
from review_relay.selector import select_credential
from review_relay.validation import validate_review_request

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many sweeps over the key pool to make and how long to wait between them."""
    max_wait_cycles: int = MAX_WAIT_CYCLES
    wait_base_seconds: float = WAIT_BASE_SECONDS
    wait_step_seconds: float = WAIT_STEP_SECONDS
    max_attempts_per_cycle: int | None = None

    def wait_seconds(self, wait_cycle: int) -> float:
        """Wait after sweep `wait_cycle` failed: 45s, 65s, 85s with defaults."""
        return self.wait_base_seconds + wait_cycle * self.wait_step_seconds

    def attempts_per_cycle(self, pool_size: int) -> int:
        if self.max_attempts_per_cycle is None:
            return pool_size
        return self.max_attempts_per_cycle


@dataclass(frozen=True)
class ReviewOutcome:
    """Successful review and the key that produced it."""
    review: ReviewResult
    credential: str


class RetryOrchestrator:
    """Drives review attempts across keys and wait cycles."""

    def __init__(
        self,
        pool: CredentialPool,
        executor: ReviewExecutor,
        policy: RetryPolicy | None = None,
        cooldown_seconds: float = KEY_COOLDOWN_SECONDS,
        max_error_count: int = MAX_KEY_ERROR_COUNT,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize orchestrator.

        Args:
            pool: Shared key pool
            executor: Runs single attempts
            policy: Retry policy (defaults from constants)
            cooldown_seconds: Passed to key selection
            max_error_count: Passed to key selection
            sleep: Called with the wait between cycles
            clock: Returns current time in seconds
        """
        self.pool = pool
        self.executor = executor
        self.policy = policy or RetryPolicy()
        self.cooldown_seconds = cooldown_seconds
        self.max_error_count = max_error_count
        self._sleep = sleep
        self._clock = clock

    def review(self, request: ReviewRequest) -> ReviewOutcome:
        """Review code, rotating keys and waiting until an attempt succeeds.

        Args:
            request: Code and language to review

        Returns:
            Review and the key that produced it

        Raises:
            ValidationError: If code or language is missing
            ConfigurationError: If no keys are configured
            CredentialsExhaustedError: If every attempt in every cycle failed
        """
        validate_review_request(request.source_code, request.language_id)
        self.pool.require_credentials()

        prompt = build_review_prompt(request.source_code, request.language_id)
        policy = self.policy
        attempts = policy.attempts_per_cycle(len(self.pool))
        last_error: Exception | None = None

        for wait_cycle in range(policy.max_wait_cycles + 1):
            if wait_cycle > 0:
                logger.info(
                    f"Wait cycle {wait_cycle}/{policy.max_wait_cycles}: "
                    "retrying all keys after cooldown"
                )
            used: set[str] = set()

            for attempt in range(attempts):
                credential = select_credential(
                    self.pool,
                    self._clock(),
                    cooldown_seconds=self.cooldown_seconds,
                    max_error_count=self.max_error_count,
                )
                if credential in used:
                    continue
                used.add(credential)

                masked = mask_credential(credential)
                logger.info(f"Attempt {attempt + 1}/{attempts} with key {masked}")
                self.pool.mark_used(credential, self._clock())

                outcome = self.executor.execute(credential, prompt, request.source_code)

                if isinstance(outcome, Success):
                    self.pool.reset_errors(credential)
                    logger.info(f"Review succeeded with key {masked}")
                    return ReviewOutcome(review=outcome.review, credential=credential)

                last_error = outcome.error
                self.pool.record_error(credential, self._clock())
                if isinstance(outcome, RateLimited):
                    logger.warning(f"Key {masked} rate limited, rotating to next key: {last_error}")
                    self.pool.advance_cursor()
                else:
                    logger.warning(
                        f"Key {masked} failed with {type(last_error).__name__}: {last_error}"
                    )

            if wait_cycle < policy.max_wait_cycles:
                wait = policy.wait_seconds(wait_cycle)
                logger.warning(f"All keys exhausted. Waiting {wait:.0f}s before retrying...")
                self.pool.reset_all()
                self._sleep(wait)

        logger.error(f"All API keys exhausted after all wait cycles: {last_error}")
        raise CredentialsExhaustedError(last_error, len(self.pool))
