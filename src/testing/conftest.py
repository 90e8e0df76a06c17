import io
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.error import HTTPError
from urllib.parse import parse_qs, urlparse

import pytest

import entitysearch.comm.entity_client as entity_client_module

USER_METADATA = {
    "name": "user",
    "fields": [
        {"name": "id", "type": "integer", "search": True},
        {"name": "email", "type": "string", "search": True},
        {"name": "active", "type": "boolean", "search": False},
    ],
}

ORDER_METADATA = {
    "name": "orders",
    "fields": [
        {"name": "id", "type": "long", "search": True},
        {"name": "amount", "type": "double", "search": True},
        {"name": "paid", "type": "boolean", "search": True},
        {"name": "created", "type": "timestamp", "search": True},
        {"name": "note", "type": "varchar", "search": False},
    ],
}


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Restores the 'entitysearch' logger after tests that reconfigure it."""
    logger = logging.getLogger("entitysearch")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def user_metadata() -> Dict[str, Any]:
    return json.loads(json.dumps(USER_METADATA))


@pytest.fixture
def order_metadata() -> Dict[str, Any]:
    return json.loads(json.dumps(ORDER_METADATA))


class _FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeService:
    """
    In-memory stand-in for the remote entity service, served through a
    patched `urlopen`.

    Attributes:
        catalog: Payload of the metadata endpoint.
        sql_handler: Callable `(sql, user) -> (status, payload)` answering the
            query endpoint.
        requests: Every requested URL, in order.
    """

    def __init__(self):
        self.catalog: Any = {"entities": [USER_METADATA, ORDER_METADATA]}
        self.sql_handler: Callable[[str, Optional[str]], Tuple[int, Any]] = (
            lambda sql, user: (200, {"result": [{"header": [], "values": []}]})
        )
        self.requests: List[str] = []
        self.queries: List[Tuple[str, Optional[str]]] = []
        self.unreachable = False

    def urlopen(self, req, timeout=None):
        url = req.full_url
        self.requests.append(url)
        if self.unreachable:
            raise ConnectionRefusedError("Connection refused")

        parsed = urlparse(url)
        if parsed.path.endswith("/entityMeta"):
            return self._answer(url, 200, self.catalog)
        if parsed.path.endswith("/sql"):
            params = parse_qs(parsed.query)
            sql = params["sql"][0]
            user = params["user"][0] if "user" in params else None
            self.queries.append((sql, user))
            status, payload = self.sql_handler(sql, user)
            return self._answer(url, status, payload)
        return self._answer(url, 404, "not found")

    @staticmethod
    def _answer(url: str, status: int, payload: Any):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        if status != 200:
            raise HTTPError(url, status, "error", {}, io.BytesIO(body))
        return _FakeResponse(body)


@pytest.fixture
def fake_service(monkeypatch) -> FakeService:
    service = FakeService()
    monkeypatch.setattr(entity_client_module, "urlopen", service.urlopen)
    return service
