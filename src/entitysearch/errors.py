"""
Error taxonomy of the entitysearch package.

Every error raised by the query-building core derives from
[`EntitySearchError`][entitysearch.errors.EntitySearchError]. Each concrete
class also derives from the builtin exception that best describes it, so callers
can catch either the package-specific type or the familiar builtin one.
"""

from typing import Optional


class EntitySearchError(Exception):
    """Base class for all entitysearch errors."""


class MetadataError(EntitySearchError, ValueError):
    """Entity metadata is missing, malformed, or does not describe the requested entity."""


class UnknownFieldError(EntitySearchError, KeyError):
    """
    A value was set on a field that is not a current searchable field.

    Attributes:
        field_name: The offending field name.
        entity_name: The entity the builder was initialized with.
    """

    def __init__(self, field_name: str, entity_name: Optional[str] = None):
        self.field_name = field_name
        self.entity_name = entity_name
        super().__init__(field_name)

    def __str__(self) -> str:
        if self.entity_name is None:
            return f"'{self.field_name}' is not a searchable field"
        return f"'{self.field_name}' is not a searchable field of entity '{self.entity_name}'"


class NotInitializedError(EntitySearchError, RuntimeError):
    """An operation was invoked on a QueryBuilder before `initialize()`."""


class FormatError(EntitySearchError, TypeError, ValueError):
    """A value is absent or incompatible with the declared field type."""


class QueryExecutionError(EntitySearchError):
    """
    The query execution endpoint answered with an error payload.

    Attributes:
        query: The query string that was sent.
        message: The error message reported by the service.
    """

    def __init__(self, message: str, query: Optional[str] = None):
        self.message = message
        self.query = query
        super().__init__(message)
