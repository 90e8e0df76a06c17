from .metadata import (
    FieldMetadata as FieldMetadata,
    EntityMetadata as EntityMetadata,
    EntityCatalog as EntityCatalog,
)
from .response import QueryResult as QueryResult
