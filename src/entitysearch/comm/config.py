"""
Configuration Module.

This module defines the connection settings used by the
[`EntityClient`][entitysearch.comm.EntityClient] to reach the metadata and
query endpoints of the remote service.
"""

from dataclasses import dataclass

DEFAULT_PORT = 7070
DEFAULT_BASE_PATH = "/cosyan"
DEFAULT_TIMEOUT = 5


@dataclass
class ClientConfig:
    """
    Connection settings for the remote entity service.

    Both endpoints live under a common base URL:

    * `{base_url}/entityMeta`: the metadata source.
    * `{base_url}/sql`: the query execution endpoint.
    """

    host: str = "localhost"
    """Hostname of the service."""

    port: int = DEFAULT_PORT
    """TCP port of the service."""

    base_path: str = DEFAULT_BASE_PATH
    """Path prefix shared by the service endpoints."""

    scheme: str = "http"
    """URL scheme, `http` or `https`."""

    timeout: float = DEFAULT_TIMEOUT
    """Maximum time in seconds to wait for a response."""

    def __post_init__(self):
        if self.scheme not in ("http", "https"):
            raise ValueError(f"Unsupported scheme '{self.scheme}'")
        if self.timeout <= 0:
            raise ValueError("'timeout' must be a positive number of seconds")

    @property
    def base_url(self) -> str:
        path = "/" + self.base_path.strip("/") if self.base_path.strip("/") else ""
        return f"{self.scheme}://{self.host}:{self.port}{path}"
