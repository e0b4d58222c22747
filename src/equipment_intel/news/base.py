from typing import Protocol

from equipment_intel.data import NewsArticle


class NewsFeed(Protocol):
    """Interface for a news search feed."""

    async def fetch(self, text: str, *, region: str, max_results: int = 5) -> list[NewsArticle]:
        """Fetch articles matching a search text.

        Args:
            text: Free-text search query.
            region: Two-letter region code scoping the search.
            max_results: Maximum articles to return.

        Returns:
            Articles in feed order, tagged with ``region``.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        ...
