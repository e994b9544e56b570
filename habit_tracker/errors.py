"""Errors raised by the persistence layer."""


class StoreUnavailable(Exception):
    """The document store could not be reached or failed to run a query."""
