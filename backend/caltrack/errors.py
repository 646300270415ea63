# caltrack/errors.py
"""
Error taxonomy for the store.

Everything raised out of ``Store.transaction()`` is raised after the
transaction rolled back, so a caught error always means nothing was written.
"""


class CaltrackError(Exception):
    """Base class for all store errors."""


class StoreUnavailableError(CaltrackError):
    """The database file cannot be opened or the schema cannot be created."""


class ReferentialError(CaltrackError):
    """A write references a parent row that does not exist."""

    def __init__(self, entity: str, entity_id: int | None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} does not exist")


class ParseError(CaltrackError):
    """An import document is malformed."""


class ProgressionChainError(CaltrackError):
    """A write would leave an exercise's progression chain inconsistent."""


class NotFoundError(CaltrackError):
    """Update/delete target is absent.

    The store reports these cases as zero rows affected; callers that want an
    exception (e.g. HTTP handlers) raise this themselves.
    """
