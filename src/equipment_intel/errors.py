"""Failure taxonomy for the extraction pipeline.

Query-fatal failures (``SessionLaunchFailure``, ``ResultsNotFound``) abort the
browser half of a query and are surfaced on the ``QueryResult``. Everything
else is scoped to a single card or a single news fetch: it is logged and
recorded, never raised to the caller.
"""


class IntelError(Exception):
    """Base class for all pipeline failures."""

    fatal: bool = False


# ============================================================
# Query-fatal
# ============================================================


class SessionLaunchFailure(IntelError):
    """The browser could not be started."""

    fatal = True


class ResultsNotFound(IntelError):
    """No result cards could be located for the query."""

    fatal = True


class NavigationFailure(ResultsNotFound):
    """The search page itself failed to load."""


class ExtractionAborted(IntelError):
    """The browser half of a query stopped on an unexpected error."""

    fatal = True


# ============================================================
# Scoped (non-fatal)
# ============================================================


class GateTimeout(IntelError):
    """The disclaimer gate did not appear within its probe window."""


class CardOpenTimeout(IntelError):
    """A card's detail overlay did not appear within its budget."""


class CardExtractionEmpty(IntelError):
    """A detail overlay opened but yielded no usable content."""


class ModalStuck(IntelError):
    """A detail overlay survived every close strategy."""


class NewsFetchFailure(IntelError):
    """A single news feed request failed."""
