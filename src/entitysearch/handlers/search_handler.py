"""
Entity Search Handler.

This module provides the `EntitySearchHandler`, the session-level controller
that ties the [`QueryBuilder`][entitysearch.query.QueryBuilder] to an
[`EntityClient`][entitysearch.comm.EntityClient]. It plays the role of a search
form: load the entity schema, collect filter values, run the search and keep
the outcome (rows or a displayable error) for the front end to render.
"""

from typing import Any, Mapping, Optional, Tuple

from ..comm import EntityClient
from ..errors import MetadataError, QueryExecutionError
from ..logging_config import get_logger
from ..models.metadata import EntityMetadata
from ..models.response import QueryResult
from ..query import QueryBuilder, SearchField, parse_value

# Set the hierarchical logger
logger = get_logger(__name__)


class EntitySearchHandler:
    """
    Drives one search session over a single entity type.

    Transport failures never raise out of
    [`load_metadata()`][entitysearch.handlers.EntitySearchHandler.load_metadata]
    and [`search()`][entitysearch.handlers.EntitySearchHandler.search]: they are
    stored in `error` for display. A failed metadata refresh leaves the
    previously loaded schema and the current filter values untouched; a failed
    search clears the previous result rows.

    Errors of the query builder itself (unknown field, type mismatch, use
    before the schema is loaded) are raised to the caller.

    Example:
        ```python
        with EntityClient.connect("localhost", 7070) as client:
            handler = EntitySearchHandler(client, "user")
            if handler.load_metadata():
                handler.set_text("email", "a@b.com")
                result = handler.search(user="admin")
        ```
    """

    def __init__(self, client: EntityClient, entity_name: str):
        self._client = client
        self._entity_name = entity_name
        self._builder = QueryBuilder()

        self.entity_list: Optional[QueryResult] = None
        """The rows returned by the last successful search."""
        self.error: Optional[str] = None
        """The message of the last failed operation, cleared by the next success."""

    @property
    def entity_name(self) -> str:
        return self._entity_name

    @property
    def builder(self) -> QueryBuilder:
        return self._builder

    @property
    def metadata(self) -> Optional[EntityMetadata]:
        return self._builder.metadata

    @property
    def search_fields(self) -> Tuple[SearchField, ...]:
        return self._builder.search_fields

    def load_metadata(self) -> bool:
        """
        Fetches the entity schema and rebuilds the search fields from it.

        Returns:
            True on success, False if the fetch failed (see `error`).
        """
        try:
            meta = self._client.entity_metadata(self._entity_name)
        except (ConnectionError, MetadataError) as e:
            logger.error(f"Loading metadata for '{self._entity_name}' failed: '{e}'")
            self.error = str(e)
            return False

        self._builder.initialize(meta)
        self.error = None
        return True

    def set_value(self, field_name: str, value: Any) -> None:
        self._builder.set_value(field_name, value)

    def set_values(self, values: Mapping[str, Any]) -> None:
        self._builder.set_values(values)

    def set_text(self, field_name: str, text: Optional[str]) -> None:
        """
        Sets a field from raw user input, converting it to the field type.

        Raises:
            NotInitializedError: Before the schema is loaded.
            UnknownFieldError: If the field is not searchable.
            FormatError: If the text cannot be read as the field type.
        """
        field_type = self._builder.field_type(field_name)
        self._builder.set_value(field_name, parse_value(text, field_type))

    def reset(self) -> None:
        self._builder.reset()

    def build_query(self) -> str:
        return self._builder.build()

    def search(self, user: Optional[str] = None) -> Optional[QueryResult]:
        """
        Runs the query built from the current filter values.

        Args:
            user: The session user identifier forwarded to the service.

        Returns:
            The result rows, or None if the execution failed (see `error`).

        Raises:
            NotInitializedError: Before the schema is loaded.
        """
        query = self._builder.build()
        try:
            result = self._client.execute(query, user=user)
        except (ConnectionError, QueryExecutionError) as e:
            logger.error(f"Query '{query}' failed: '{e}'")
            self.entity_list = None
            self.error = str(e)
            return None

        self.entity_list = result
        self.error = None
        return result
