from .builder import QueryBuilder as QueryBuilder, SearchField as SearchField
from .formatter import format_value as format_value, parse_value as parse_value
