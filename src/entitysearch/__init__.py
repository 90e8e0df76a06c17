"""
entitysearch - metadata-driven search client for a remote entity service.

This module provides the main entry points:

- **QueryBuilder**: Derives the searchable fields of an entity from its
  metadata and renders filter values into a query string.
- **EntityClient**: Fetches entity metadata and executes queries over HTTP.
- **EntitySearchHandler**: Ties both together for one search session.

Example:
    >>> from entitysearch import EntityClient, EntitySearchHandler
    >>> with EntityClient.connect("localhost", 7070) as client:
    ...     handler = EntitySearchHandler(client, "user")
    ...     handler.load_metadata()
"""

# --- Core ---
from .query import (
    QueryBuilder as QueryBuilder,
    SearchField as SearchField,
    format_value as format_value,
    parse_value as parse_value,
)

# --- Models ---
from .enum import FieldType as FieldType
from .models import (
    FieldMetadata as FieldMetadata,
    EntityMetadata as EntityMetadata,
    EntityCatalog as EntityCatalog,
    QueryResult as QueryResult,
)

# --- Client & Handlers ---
from .comm import ClientConfig as ClientConfig, EntityClient as EntityClient
from .handlers import EntitySearchHandler as EntitySearchHandler

# --- Errors ---
from .errors import (
    EntitySearchError as EntitySearchError,
    MetadataError as MetadataError,
    UnknownFieldError as UnknownFieldError,
    NotInitializedError as NotInitializedError,
    FormatError as FormatError,
    QueryExecutionError as QueryExecutionError,
)

from .logging_config import (
    get_logger as get_logger,
    setup_logging as setup_logging,
)

__all__ = [
    # Core
    "QueryBuilder",
    "SearchField",
    "format_value",
    "parse_value",
    # Models
    "FieldType",
    "FieldMetadata",
    "EntityMetadata",
    "EntityCatalog",
    "QueryResult",
    # Client & Handlers
    "ClientConfig",
    "EntityClient",
    "EntitySearchHandler",
    # Errors
    "EntitySearchError",
    "MetadataError",
    "UnknownFieldError",
    "NotInitializedError",
    "FormatError",
    "QueryExecutionError",
    # Logging
    "get_logger",
    "setup_logging",
]


# --- Set up the top-level logger for the package ---

from logging import NullHandler

_root_logger = get_logger()
_root_logger.addHandler(NullHandler())
