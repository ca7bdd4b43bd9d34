"""Logging setup for review-relay."""
import logging
import sys

LOGGER_NAME = "review_relay"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the package logger.

    Args:
        verbose: Log INFO and above (key attempts, waits)
        quiet: Log ERROR and above only; wins over verbose
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Only ever attach one handler, setup may run once per app instance
    if not any(getattr(h, "_review_relay", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._review_relay = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the review_relay namespace.

    Args:
        name: Module name, usually __name__

    Returns:
        Logger named review_relay.<name>, or name itself if already namespaced
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
