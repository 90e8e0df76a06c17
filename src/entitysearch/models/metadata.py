"""
Entity Metadata Models.

Read-only views of the schema information published by the remote service's
metadata endpoint. Instances are factory-generated from server payloads via
`from_dict()` and are never mutated afterwards: a re-fetch produces new objects.

The service payload has the shape:

```json
{"entities": [{"name": "user", "fields": [{"name": "id", "type": "integer", "search": true}]}]}
```
"""

from typing import Any, List, Mapping, Optional, Tuple

import pydantic
from pydantic import AliasChoices, ConfigDict, Field, field_validator, model_validator

from ..enum import FieldType
from ..errors import MetadataError


class FieldMetadata(pydantic.BaseModel):
    """
    Schema description of one entity attribute.

    Attributes:
        name: Field name, unique within its entity.
        type: The primitive kind of the field values.
        searchable: Whether the field may be used in a filter clause.
            Read from the `search` key of the service payload
            (`searchable` is accepted as well).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    type: FieldType
    searchable: bool = Field(
        default=False, validation_alias=AliasChoices("searchable", "search")
    )

    @field_validator("type", mode="before")
    @classmethod
    def _resolve_type(cls, value: Any) -> FieldType:
        return FieldType.from_name(value)


class EntityMetadata(pydantic.BaseModel):
    """
    Schema description of one entity type.

    The order of `fields` is the declared presentation order; it is also the
    order in which filter clauses are emitted by the
    [`QueryBuilder`][entitysearch.query.QueryBuilder].
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    fields: Tuple[FieldMetadata, ...] = ()

    @model_validator(mode="after")
    def _check_unique_field_names(self) -> "EntityMetadata":
        seen = set()
        for fmeta in self.fields:
            if fmeta.name in seen:
                raise ValueError(
                    f"Duplicate field '{fmeta.name}' in entity '{self.name}'"
                )
            seen.add(fmeta.name)
        return self

    @property
    def searchable_fields(self) -> Tuple[FieldMetadata, ...]:
        """The searchable subset of `fields`, in declared order."""
        return tuple(f for f in self.fields if f.searchable)

    @classmethod
    def from_dict(cls, mdict: Mapping[str, Any]) -> "EntityMetadata":
        """
        Validates a raw metadata mapping into an `EntityMetadata`.

        Raises:
            MetadataError: If the mapping is missing, has no name, or any field
                description is malformed.
        """
        if mdict is None:
            raise MetadataError("Entity metadata is missing")
        if not isinstance(mdict, Mapping):
            raise MetadataError(
                f"Entity metadata must be a mapping, got '{type(mdict).__name__}'"
            )
        if not mdict.get("name"):
            raise MetadataError("Entity metadata has no name")
        try:
            return cls.model_validate(dict(mdict))
        except pydantic.ValidationError as e:
            raise MetadataError(
                f"Malformed metadata for entity '{mdict.get('name')}'.\nInner err: {e}"
            ) from e


class EntityCatalog(pydantic.BaseModel):
    """The full payload of the metadata endpoint: every entity the service exposes."""

    model_config = ConfigDict(frozen=True)

    entities: Tuple[EntityMetadata, ...] = ()

    def names(self) -> List[str]:
        return [e.name for e in self.entities]

    def find(self, name: str) -> Optional[EntityMetadata]:
        return next((e for e in self.entities if e.name == name), None)

    @classmethod
    def from_dict(cls, cdict: Mapping[str, Any]) -> "EntityCatalog":
        """
        Validates the metadata endpoint payload.

        Raises:
            MetadataError: If the payload is not a mapping with an `entities` list
                or any entity is malformed.
        """
        if not isinstance(cdict, Mapping) or "entities" not in cdict:
            raise MetadataError("Metadata payload has no 'entities' list")
        entities = cdict["entities"]
        if not isinstance(entities, list):
            raise MetadataError("Metadata payload 'entities' is not a list")
        return cls(entities=tuple(EntityMetadata.from_dict(e) for e in entities))
