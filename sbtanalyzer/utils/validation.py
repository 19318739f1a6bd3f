"""Input validation utilities for registry URLs."""

import logging
from urllib.parse import urlparse

logger = logging.getLogger("sbtanalyzer.utils.validation")

# Schemes a package registry can be served from
ALLOWED_SCHEMES = {"http", "https", "ftp", "ftps"}


def validate_url(url: str) -> bool:
    """Check that a resolver URL is usable as a registry.

    Checks:
    1. Scheme is allowed.
    2. A host is present.

    Invalid URLs are reported at debug level only: build files routinely
    declare local or placeholder resolvers.

    Args:
        url: URL string to validate.

    Returns:
        bool: True if valid, False otherwise.
    """
    if not url or url.strip() != url:
        return False

    try:
        parsed = urlparse(url)
        # Accessing port validates it; raises ValueError when out of range
        parsed.port
    except ValueError as e:
        logger.debug("Failed to parse URL %s: %s", url, e)
        return False

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        logger.debug("URL scheme not allowed: %s", url)
        return False

    if not parsed.hostname:
        logger.debug("URL has no host: %s", url)
        return False

    return True


__all__ = ["validate_url", "ALLOWED_SCHEMES"]
