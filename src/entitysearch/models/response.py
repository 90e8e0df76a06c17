from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Sequence

import pandas as pd


@dataclass
class QueryResult:
    """
    The tabular result of an executed query.

    The service answers a query with one result per executed statement. The
    first statement result is the one of interest for a single `select`:

    ```json
    {"result": [{"header": ["id", "email"], "values": [[1, "a@b.com"]]}]}
    ```

    Rows are exposed as mappings from field name to value, in header order.

    Attributes:
        header (List[str]): The column names, in result order.
        rows (List[Dict[str, Any]]): One mapping per result row.
    """

    header: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_pandas(self) -> pd.DataFrame:
        """Returns the rows as a DataFrame whose columns follow the header order."""
        return pd.DataFrame(self.rows, columns=self.header)

    @classmethod
    def _from_rows(cls, rows: Sequence[Mapping[str, Any]]) -> "QueryResult":
        header: List[str] = []
        for row in rows:
            header.extend(k for k in row if k not in header)
        return cls(header=header, rows=[dict(row) for row in rows])

    @classmethod
    def _from_dict(cls, rdict: Mapping[str, Any]) -> "QueryResult":
        results = rdict.get("result")
        if results is None:
            raise ValueError("Query response has no 'result' entry")
        if not isinstance(results, list):
            raise ValueError(
                f"Query response 'result' must be a list, got '{type(results).__name__}'"
            )
        if not results:
            return cls()

        first = results[0]
        # Already materialized as a list of row mappings
        if isinstance(first, list):
            return cls._from_rows(first)
        if not isinstance(first, Mapping):
            raise ValueError(f"Unexpected statement result '{first!r}'")
        if "header" not in first:
            # Statement results (e.g. affected lines) carry no rows
            return cls()

        header = list(first["header"])
        rows = []
        for values in first.get("values", []):
            if len(values) != len(header):
                raise ValueError(
                    f"Row width {len(values)} does not match header width {len(header)}"
                )
            rows.append(dict(zip(header, values)))
        return cls(header=header, rows=rows)
