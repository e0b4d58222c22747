"""Pipeline protocol for equipment intelligence queries."""

from typing import Protocol

from equipment_intel.data import QueryResult


class Pipeline(Protocol):
    """Interface for end-to-end equipment intelligence pipelines."""

    async def run(
        self,
        query: str,
        *,
        region: str | None = None,
        include_report: bool = False,
    ) -> QueryResult:
        """Execute the pipeline for one equipment query.

        Args:
            query: Free-text equipment name.
            region: Optional region code for news scoping.
            include_report: Render an IntelligenceReport onto the result.

        Returns:
            A QueryResult in every outcome; partial degradation never raises.
        """
        ...
