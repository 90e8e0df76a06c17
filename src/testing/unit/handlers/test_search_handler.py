import logging

import pytest

from entitysearch import (
    EntityClient,
    EntitySearchHandler,
    FormatError,
    NotInitializedError,
    UnknownFieldError,
)


@pytest.fixture
def client(fake_service):
    with EntityClient.connect("localhost") as client:
        yield client


def test_load_metadata_and_search(fake_service, client):
    fake_service.sql_handler = lambda sql, user: (
        200,
        {"result": [{"header": ["id", "email"], "values": [[1, "a@b.com"]]}]},
    )
    handler = EntitySearchHandler(client, "user")
    assert handler.load_metadata()
    assert handler.error is None
    assert [f.name for f in handler.search_fields] == ["id", "email"]

    handler.set_text("email", "a@b.com")
    result = handler.search(user="admin")

    assert fake_service.queries == [("select * from user where email='a@b.com';", "admin")]
    assert result is handler.entity_list
    assert result.rows == [{"id": 1, "email": "a@b.com"}]


def test_search_before_metadata(client):
    handler = EntitySearchHandler(client, "user")
    with pytest.raises(NotInitializedError):
        handler.search()


def test_set_text_converts_to_field_type(client):
    handler = EntitySearchHandler(client, "orders")
    handler.load_metadata()
    handler.set_text("id", "12")
    handler.set_text("paid", "no")
    handler.set_text("created", "2018-01-31")
    assert handler.build_query() == (
        "select * from orders where id=12 and paid=false and created=dt '2018-01-31';"
    )

    handler.set_text("id", "  ")
    assert handler.build_query() == (
        "select * from orders where paid=false and created=dt '2018-01-31';"
    )


def test_set_text_rejects_precise_dates(client):
    handler = EntitySearchHandler(client, "orders")
    handler.load_metadata()
    with pytest.raises(FormatError):
        handler.set_text("created", "2018-01-31T12:00:00.750+02:00")
    assert handler.build_query() == "select * from orders;"


def test_set_text_errors(client):
    handler = EntitySearchHandler(client, "user")
    handler.load_metadata()
    with pytest.raises(FormatError):
        handler.set_text("id", "abc")
    with pytest.raises(UnknownFieldError):
        handler.set_text("active", "true")


def test_failed_metadata_load_sets_error(fake_service, client, caplog):
    fake_service.unreachable = True
    handler = EntitySearchHandler(client, "user")
    with caplog.at_level(logging.ERROR, logger="entitysearch"):
        assert not handler.load_metadata()
    assert "unreachable" in handler.error
    assert handler.metadata is None
    assert "Loading metadata for 'user' failed" in caplog.text


def test_failed_refresh_keeps_previous_state(fake_service, client):
    handler = EntitySearchHandler(client, "user")
    assert handler.load_metadata()
    handler.set_value("id", 7)

    fake_service.unreachable = True
    assert not handler.load_metadata()
    assert handler.error is not None
    assert handler.metadata.name == "user"
    assert handler.build_query() == "select * from user where id=7;"

    # A successful refresh clears the error and starts from empty values
    fake_service.unreachable = False
    assert handler.load_metadata()
    assert handler.error is None
    assert handler.build_query() == "select * from user;"


def test_unknown_entity_sets_error(client):
    handler = EntitySearchHandler(client, "invoice")
    assert not handler.load_metadata()
    assert handler.error == "Unknown entity 'invoice'"


def test_failed_search_clears_rows(fake_service, client):
    handler = EntitySearchHandler(client, "user")
    handler.load_metadata()
    assert handler.search() is not None

    fake_service.sql_handler = lambda sql, user: (500, {"error": "Session expired."})
    assert handler.search(user="admin") is None
    assert handler.entity_list is None
    assert handler.error == "Session expired."

    fake_service.sql_handler = lambda sql, user: (200, {"result": []})
    assert handler.search(user="admin") is not None
    assert handler.error is None


def test_reset(client):
    handler = EntitySearchHandler(client, "user")
    handler.load_metadata()
    handler.set_values({"id": 1, "email": "a@b.com"})
    handler.reset()
    assert handler.build_query() == "select * from user;"
