"""Command-line interface for review-relay."""
import sys
from pathlib import Path

import click
import uvicorn
from dotenv import load_dotenv

from review_relay.__version__ import __version__
from review_relay.app import create_app
from review_relay.config import DEFAULT_CONFIG_FILE, load_config
from review_relay.errors import ConfigurationError
from review_relay.logging_config import get_logger, setup_logging


@click.command()
@click.version_option(version=__version__, prog_name="review-relay")
@click.option("--host", type=str, help="Interface to bind (overrides HOST)")
@click.option("--port", type=click.IntRange(1, 65535), help="Port to listen on (overrides PORT)")
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", is_flag=True, help="Suppress warnings (errors only)")
def main(
    host: str | None,
    port: int | None,
    config: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """review-relay: code review API with key rotation."""
    try:
        _run_main(host, port, config, verbose, quiet)
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user", err=True)
        sys.exit(130)  # Standard SIGINT exit code


def _run_main(
    host: str | None,
    port: int | None,
    config: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Internal main logic - extracted for KeyboardInterrupt handling."""
    setup_logging(verbose=verbose, quiet=quiet)
    logger = get_logger(__name__)

    load_dotenv()
    config_path = Path(config) if config else Path.cwd() / DEFAULT_CONFIG_FILE

    try:
        cfg = load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if host:
        cfg.host = host
    if port:
        cfg.port = port

    if not cfg.api_keys:
        logger.warning("No API keys configured; review requests will fail until keys are set")

    app = create_app(cfg)
    click.echo(f"Server running on http://{cfg.host}:{cfg.port}", err=True)
    click.echo(f"API keys loaded: {len(cfg.api_keys)}", err=True)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level="warning" if quiet else "info")


if __name__ == "__main__":
    main()
