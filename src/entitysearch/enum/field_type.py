from enum import StrEnum

from ..errors import MetadataError


class FieldType(StrEnum):
    """
    Primitive kinds a searchable entity field can hold.

    The member values are the canonical names; the remote service reports its
    own column type names (e.g. `varchar`, `long`, `timestamp`), which are
    resolved through [`from_name()`][entitysearch.enum.FieldType.from_name].
    """

    STRING = "string"
    """Free text, rendered as a quoted literal."""

    INTEGER = "integer"
    """Whole numbers, rendered unquoted."""

    FLOAT = "float"
    """Floating point numbers, rendered unquoted."""

    BOOLEAN = "boolean"
    """`true` / `false` literals."""

    DATE = "date"
    """Dates and timestamps, rendered as `dt '...'` literals."""

    @classmethod
    def from_name(cls, name: str) -> "FieldType":
        """
        Resolves a type name reported by the service into a `FieldType`.

        Args:
            name: A canonical name or one of the service aliases (case-insensitive).

        Raises:
            MetadataError: If the name is not a supported type.
        """
        if isinstance(name, FieldType):
            return name
        if not isinstance(name, str):
            raise MetadataError(f"Field type must be a string, got '{type(name).__name__}'")
        key = name.strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise MetadataError(f"Unsupported field type '{name}'") from None


_ALIASES = {
    "string": FieldType.STRING,
    "varchar": FieldType.STRING,
    "text": FieldType.STRING,
    "integer": FieldType.INTEGER,
    "int": FieldType.INTEGER,
    "long": FieldType.INTEGER,
    "float": FieldType.FLOAT,
    "double": FieldType.FLOAT,
    "boolean": FieldType.BOOLEAN,
    "bool": FieldType.BOOLEAN,
    "date": FieldType.DATE,
    "timestamp": FieldType.DATE,
    "datetime": FieldType.DATE,
}
