"""
Metadata-driven query builder.

The [`QueryBuilder`][entitysearch.query.builder.QueryBuilder] derives the set of
searchable fields from an entity's metadata, holds the current filter value of
each of them and renders the query string sent to the execution endpoint:

```
select * from <entity>[ where <field>=<literal>[ and <field>=<literal>]*];
```

Example:
    ```python
    from entitysearch import QueryBuilder

    builder = QueryBuilder()
    builder.initialize(
        {
            "name": "user",
            "fields": [
                {"name": "id", "type": "integer", "search": True},
                {"name": "email", "type": "string", "search": True},
                {"name": "active", "type": "boolean", "search": False},
            ],
        }
    )
    builder.set_value("email", "a@b.com")
    builder.build()  # "select * from user where email='a@b.com';"
    ```
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..enum import FieldType
from ..errors import MetadataError, NotInitializedError, UnknownFieldError
from ..logging_config import get_logger
from ..models.metadata import EntityMetadata
from .formatter import format_value

# Set the hierarchical logger
logger = get_logger(__name__)


@dataclass
class SearchField:
    """
    The working state of one searchable field.

    Attributes:
        name: The field name.
        type: The declared field type.
        value: The current filter value; `None` means "no filter".
    """

    name: str
    type: FieldType
    value: Any = None

    @property
    def is_set(self) -> bool:
        """True if the field contributes a clause to the query."""
        return not _is_empty(self.value)


def _is_empty(value: Any) -> bool:
    # Only absence counts as empty: 0 and False are legitimate filters
    return value is None or (isinstance(value, str) and value == "")


class QueryBuilder:
    """
    Builds `select` queries over one entity from user-supplied field values.

    The builder has two states. A fresh instance is *uninitialized*: every
    operation except [`initialize()`][entitysearch.query.builder.QueryBuilder.initialize]
    raises `NotInitializedError`. After `initialize()` it is *ready* and stays
    ready for the life of the session; calling `initialize()` again replaces
    the field set wholesale.

    Values are type-checked when they are set, so `build()` never fails on a
    ready builder.

    Note: Single Writer
        A builder belongs to one logical session and is not thread-safe.
    """

    def __init__(self, metadata: Union[EntityMetadata, Mapping[str, Any], None] = None):
        """
        Args:
            metadata: Optional entity metadata; if given the builder is
                initialized immediately.
        """
        self._metadata: Optional[EntityMetadata] = None
        """The metadata the current field set was derived from."""
        self._fields: Dict[str, SearchField] = {}
        """Searchable fields keyed by name, in declared order."""

        if metadata is not None:
            self.initialize(metadata)

    # --- State ---

    @property
    def is_initialized(self) -> bool:
        return self._metadata is not None

    def _require_ready(self) -> EntityMetadata:
        if self._metadata is None:
            raise NotInitializedError(
                "QueryBuilder has no entity metadata: call initialize() first."
            )
        return self._metadata

    @property
    def metadata(self) -> Optional[EntityMetadata]:
        """The entity metadata in use, or `None` before initialization."""
        return self._metadata

    @property
    def entity_name(self) -> str:
        return self._require_ready().name

    @property
    def field_names(self) -> List[str]:
        """Names of the searchable fields, in declared order."""
        self._require_ready()
        return list(self._fields)

    @property
    def search_fields(self) -> Tuple[SearchField, ...]:
        """Snapshot of the searchable fields and their current values."""
        self._require_ready()
        return tuple(replace(sfield) for sfield in self._fields.values())

    # --- Operations ---

    def initialize(self, metadata: Union[EntityMetadata, Mapping[str, Any]]) -> None:
        """
        Replaces the searchable field set with the one described by `metadata`.

        One [`SearchField`][entitysearch.query.builder.SearchField] is created per
        field flagged as searchable, with no value. Non-searchable fields are
        kept in the metadata but never get a search field.

        Args:
            metadata: An `EntityMetadata` or the raw mapping received from the
                metadata endpoint.

        Raises:
            MetadataError: If `metadata` is missing, has no name, or is malformed.
        """
        if metadata is None:
            raise MetadataError("Cannot initialize QueryBuilder without entity metadata")
        if not isinstance(metadata, EntityMetadata):
            metadata = EntityMetadata.from_dict(metadata)
        if not metadata.name:
            raise MetadataError("Entity metadata has no name")

        self._fields = {
            fmeta.name: SearchField(name=fmeta.name, type=fmeta.type)
            for fmeta in metadata.searchable_fields
        }
        self._metadata = metadata
        logger.debug(
            f"Initialized query builder for '{metadata.name}' with searchable fields {list(self._fields)}"
        )

    def _get_field(self, field_name: str) -> SearchField:
        metadata = self._require_ready()
        try:
            return self._fields[field_name]
        except KeyError:
            raise UnknownFieldError(field_name, metadata.name) from None

    def field_type(self, field_name: str) -> FieldType:
        """Returns the declared type of a searchable field."""
        return self._get_field(field_name).type

    def get_value(self, field_name: str) -> Any:
        """
        Returns the current value of a searchable field (`None` if unset).

        Raises:
            NotInitializedError: Before `initialize()`.
            UnknownFieldError: If the field is not searchable or unknown.
        """
        return self._get_field(field_name).value

    def set_value(self, field_name: str, value: Any) -> None:
        """
        Sets the filter value of a searchable field.

        Setting `None` or an empty string clears the filter for that field.

        Raises:
            NotInitializedError: Before `initialize()`.
            UnknownFieldError: If the field is not searchable or unknown.
            FormatError: If `value` does not match the field type.
        """
        sfield = self._get_field(field_name)
        if not _is_empty(value):
            # Validate now so that build() cannot fail later on
            format_value(value, sfield.type)
        sfield.value = value

    def set_values(self, values: Mapping[str, Any]) -> None:
        """
        Sets several values at once.

        Either all values are applied or, if any of them is rejected, none is.

        Raises:
            NotInitializedError: Before `initialize()`.
            UnknownFieldError: If a field is not searchable or unknown.
            FormatError: If a value does not match its field type.
        """
        checked = []
        for field_name, value in values.items():
            sfield = self._get_field(field_name)
            if not _is_empty(value):
                format_value(value, sfield.type)
            checked.append((sfield, value))
        for sfield, value in checked:
            sfield.value = value

    def reset(self) -> None:
        """
        Clears every filter value, keeping the field set.

        Raises:
            NotInitializedError: Before `initialize()`.
        """
        self._require_ready()
        for sfield in self._fields.values():
            sfield.value = None

    def build(self) -> str:
        """
        Renders the query for the current state.

        Fields without a value are omitted; with no value at all the query is
        `select * from <entity>;`. Clauses follow the declared field order, so
        repeated calls on the same state return identical strings.

        Raises:
            NotInitializedError: Before `initialize()`.
        """
        metadata = self._require_ready()

        query = f"select * from {metadata.name}"
        where = [
            f"{sfield.name}={format_value(sfield.value, sfield.type)}"
            for sfield in self._fields.values()
            if sfield.is_set
        ]
        if where:
            query = query + " where " + " and ".join(where)
        return query + ";"
