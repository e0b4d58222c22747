"""URL handling utilities."""

from __future__ import annotations

import logging
from urllib.parse import quote, urljoin, urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The domain name (without 'www.' prefix), or "Unknown" if extraction fails.
    """
    try:
        parsed = urlparse(url)
        domain = parsed.netloc
        if not domain:
            logger.warning(f"Could not get domain from url {url}")
            return "Unknown"
        if domain.startswith("www."):
            domain = domain[4:]
        return domain
    except Exception:
        return "Unknown"


def resolve_url(base_url: str, url: str) -> str:
    """Resolve a possibly relative ``url`` against the page it was found on."""
    if not base_url or url.startswith(("http://", "https://", "data:")):
        return url
    return urljoin(base_url, url)


def build_search_url(template: str, query: str) -> str:
    """Fill a search URL template's ``{query}`` slot with the encoded query."""
    return template.format(query=quote(query.strip(), safe=""))
