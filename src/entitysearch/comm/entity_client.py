"""
Entity Service Client.

This module provides the `EntityClient`, the transport between the query
builder and the remote entity service. It fetches entity metadata and submits
query strings for execution; it does not build queries itself.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..errors import MetadataError, QueryExecutionError
from ..logging_config import get_logger
from ..models.metadata import EntityCatalog, EntityMetadata
from ..models.response import QueryResult
from .config import DEFAULT_BASE_PATH, DEFAULT_PORT, DEFAULT_TIMEOUT, ClientConfig

# Set the hierarchical logger
logger = get_logger(__name__)

_META_ENDPOINT = "entityMeta"
_SQL_ENDPOINT = "sql"


class EntityClient:
    """
    The gateway to the remote entity service.

    Tip: Context Manager Usage
        ```python
        from entitysearch import EntityClient, QueryBuilder

        with EntityClient.connect("localhost", 7070) as client:
            builder = QueryBuilder(client.entity_metadata("user"))
            builder.set_value("email", "a@b.com")
            result = client.execute(builder.build(), user="admin")
        ```

    Requests are blocking and never retried; failures are reported to the
    caller as exceptions.
    """

    def __init__(self, config: ClientConfig):
        self._config = config
        """The connection settings."""
        self._closed = False

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        base_path: str = DEFAULT_BASE_PATH,
        scheme: str = "http",
    ) -> "EntityClient":
        """
        Creates a client for the service at `host:port`.

        Args:
            host (str): The server host address.
            port (int): The server port.
            timeout (float): Maximum time in seconds to wait for a response.
            base_path (str): Path prefix of the service endpoints.
            scheme (str): `http` or `https`.
        """
        logger.debug(f"Creating client for '{host}:{port}'")
        return cls(
            ClientConfig(
                host=host,
                port=port,
                timeout=timeout,
                base_path=base_path,
                scheme=scheme,
            )
        )

    def __enter__(self) -> "EntityClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        """Marks the client as closed; further requests raise `RuntimeError`."""
        self._closed = True

    # --- Transport ---

    def _url(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> str:
        url = f"{self._config.base_url}/{endpoint}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _get_json(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Any:
        if self._closed:
            raise RuntimeError("EntityClient is closed")

        url = self._url(endpoint, params)
        logger.debug(f"GET '{url}'")
        req = Request(
            url,
            headers={"Accept": "application/json", "User-Agent": "entitysearch"},
        )
        try:
            with urlopen(req, timeout=self._config.timeout) as response:
                body = response.read()
        except HTTPError as e:
            # The service reports statement errors as HTTP 500 with a JSON body
            body = e.read() if e.fp is not None else b""
            payload = _decode(body)
            if isinstance(payload, dict) and "error" in payload:
                return payload
            raise ConnectionError(
                f"Request to '{url}' failed with HTTP {e.code}.\nInner err: '{e}'"
            ) from e
        except (URLError, OSError) as e:
            raise ConnectionError(
                f"Service at '{self._config.base_url}' is unreachable.\nInner err: '{e}'"
            ) from e

        payload = _decode(body)
        if payload is None:
            raise ConnectionError(f"Response from '{url}' is not valid JSON")
        return payload

    # --- Metadata source ---

    def entity_catalog(self) -> EntityCatalog:
        """
        Fetches the metadata of every entity exposed by the service.

        Raises:
            ConnectionError: If the service cannot be reached or answers garbage.
            MetadataError: If the payload is an error or is malformed.
        """
        payload = self._get_json(_META_ENDPOINT)
        if isinstance(payload, dict) and "error" in payload:
            raise MetadataError(f"Metadata request failed: {_error_message(payload)}")
        return EntityCatalog.from_dict(payload)

    def list_entities(self) -> List[str]:
        """Returns the names of the entities exposed by the service."""
        return self.entity_catalog().names()

    def entity_metadata(self, entity_name: str) -> EntityMetadata:
        """
        Fetches the metadata of a single entity.

        Raises:
            ConnectionError: If the service cannot be reached.
            MetadataError: If the entity does not exist or its metadata is malformed.
        """
        meta = self.entity_catalog().find(entity_name)
        if meta is None:
            raise MetadataError(f"Unknown entity '{entity_name}'")
        return meta

    # --- Query execution sink ---

    def execute(self, query: str, user: Optional[str] = None) -> QueryResult:
        """
        Runs a query on the service on behalf of `user`.

        Args:
            query: A complete query string, as produced by
                [`QueryBuilder.build()`][entitysearch.query.QueryBuilder.build].
            user: The session user identifier forwarded to the service.

        Returns:
            The result set of the query.

        Raises:
            ConnectionError: If the service cannot be reached or the response is malformed.
            QueryExecutionError: If the service reports an error for the query.
        """
        params = {"sql": query}
        if user is not None:
            params["user"] = user

        payload = self._get_json(_SQL_ENDPOINT, params)
        if not isinstance(payload, dict):
            raise ConnectionError(
                f"Unexpected query response of type '{type(payload).__name__}'"
            )
        if "error" in payload:
            raise QueryExecutionError(_error_message(payload), query=query)
        try:
            return QueryResult._from_dict(payload)
        except (ValueError, TypeError) as e:
            raise ConnectionError(f"Malformed query response.\nInner err: '{e}'") from e


def _decode(body: bytes) -> Any:
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


def _error_message(payload: Dict[str, Any]) -> str:
    error = payload["error"]
    # Errors may be a plain string or an object carrying a message
    if isinstance(error, dict):
        return str(error.get("msg") or error.get("message") or error)
    return str(error)
