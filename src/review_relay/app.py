"""HTTP API for code reviews."""
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from review_relay.__version__ import __version__
from review_relay.config import Config
from review_relay.constants import RATE_LIMIT_RETRY_AFTER_SECONDS
from review_relay.credentials import CredentialPool, load_credentials, mask_credential
from review_relay.errors import ConfigurationError, CredentialsExhaustedError, ValidationError
from review_relay.executor import ReviewExecutor
from review_relay.languages import list_languages
from review_relay.logging_config import get_logger
from review_relay.models import ReviewRequest, ReviewRequestBody
from review_relay.retry import RetryOrchestrator, RetryPolicy

logger = get_logger(__name__)

KEY_SIGNUP_HINT = "Create more API keys at https://console.anthropic.com/settings/keys"
MISSING_FIELDS_MESSAGE = "Code and language are required"

router = APIRouter(prefix="/api")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_orchestrator(request: Request) -> RetryOrchestrator:
    return request.app.state.orchestrator


def get_pool(request: Request) -> CredentialPool:
    return request.app.state.pool


@router.post("/review")
def review_code(
    body: ReviewRequestBody | None = None,
    orchestrator: RetryOrchestrator = Depends(get_orchestrator),
) -> Any:
    """Review submitted code, rotating API keys on failure.

    Runs in the worker thread pool, so waiting between retry cycles does not
    hold up other requests.
    """
    if body is None:
        body = ReviewRequestBody()
    request = ReviewRequest(source_code=body.code or "", language_id=body.language or "")
    try:
        outcome = orchestrator.review(request)
    except (ValidationError, ConfigurationError, CredentialsExhaustedError):
        raise
    except Exception as e:
        logger.exception("Review failed with an unexpected error")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to analyze code. Please try again.", "details": str(e)},
        )

    return {
        "success": True,
        "review": outcome.review.to_dict(),
        "timestamp": _timestamp(),
        "keyUsed": mask_credential(outcome.credential),
    }


@router.get("/health")
def health(pool: CredentialPool = Depends(get_pool)) -> Any:
    return {
        "status": "ok",
        "timestamp": _timestamp(),
        "apiKeysConfigured": len(pool),
        "currentKeyIndex": pool.cursor,
    }


@router.get("/languages")
def languages() -> Any:
    return {"languages": list_languages()}


def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


def _request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug(f"Rejected request body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_MESSAGE})


def _configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


def _exhausted_handler(request: Request, exc: CredentialsExhaustedError) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={
            "error": (
                "All API keys are rate limited even after waiting. Please try again "
                "in 1-2 minutes or add more API keys."
            ),
            "details": str(exc.last_error) if exc.last_error is not None else None,
            "keysAvailable": exc.keys_available,
            "suggestion": KEY_SIGNUP_HINT,
        },
    )


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please wait a minute before trying again.",
            "retryAfter": RATE_LIMIT_RETRY_AFTER_SECONDS,
        },
    )


def create_app(
    config: Config,
    executor: ReviewExecutor | None = None,
    orchestrator: RetryOrchestrator | None = None,
) -> FastAPI:
    """Build the application.

    Each app owns its own key pool, so state is shared by all requests to
    that app and by nothing else.

    Args:
        config: Service configuration
        executor: Attempt executor (defaults to one using the Anthropic API)
        orchestrator: Fully built orchestrator, replaces pool and executor setup

    Returns:
        FastAPI application
    """
    if orchestrator is None:
        pool = CredentialPool(
            load_credentials(config.api_keys), error_window_seconds=config.error_window_seconds
        )
        if executor is None:
            executor = ReviewExecutor(model=config.model, timeout=config.request_timeout)
        orchestrator = RetryOrchestrator(
            pool,
            executor,
            policy=RetryPolicy(
                max_wait_cycles=config.max_wait_cycles,
                wait_base_seconds=config.wait_base_seconds,
                wait_step_seconds=config.wait_step_seconds,
            ),
            cooldown_seconds=config.cooldown_seconds,
            max_error_count=config.max_error_count,
        )

    app = FastAPI(title="review-relay", version=__version__)
    app.state.config = config
    app.state.pool = orchestrator.pool
    app.state.orchestrator = orchestrator

    limits = [config.rate_limit] if config.rate_limit else []
    app.state.limiter = Limiter(
        key_func=get_remote_address, default_limits=limits, enabled=bool(limits)
    )
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)
    app.add_exception_handler(CredentialsExhaustedError, _exhausted_handler)
    app.include_router(router)

    # Only /api routes are throttled; docs and schema stay reachable.
    for route in app.routes:
        if not getattr(route, "path", "").startswith("/api") and hasattr(route, "endpoint"):
            app.state.limiter.exempt(route.endpoint)

    logger.info(f"API keys loaded: {len(orchestrator.pool)}")
    return app
