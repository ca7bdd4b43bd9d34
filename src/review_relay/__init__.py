"""Code review service with API key rotation."""
from review_relay.__version__ import __version__

__all__ = ["__version__"]
