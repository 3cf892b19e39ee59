"""The SQLAlchemy store against an in-memory SQLite database."""

from datetime import date, datetime, timedelta, timezone

import pytest

from imagecat.catalog.auth import TokenAuthorizer
from imagecat.catalog.errors import PersistenceError
from imagecat.catalog.handler import CatalogHandler
from imagecat.catalog.schemas import ImageFields
from imagecat.catalog.sql_store import SqlImageStore

from .conftest import AUTH, NOW, TOKEN


def _fields(**overrides):
    values = dict(
        title="Sunset",
        description="d",
        keywords=["nature", "sky"],
        author="A",
        creator="C",
        capture_date=date(2023, 5, 1),
        storage_date=NOW,
        payload="aGVsbG8=",
    )
    values.update(overrides)
    return ImageFields(**values)


@pytest.fixture
def sql_store():
    return SqlImageStore("sqlite://")


def test_insert_and_get(sql_store):
    image_id = sql_store.insert_image(_fields())
    image = sql_store.get_image_by_id(image_id)
    assert image.id == image_id
    assert image.keywords == ["nature", "sky"]
    assert image.capture_date == date(2023, 5, 1)
    assert image.storage_date == NOW
    assert sql_store.get_image_by_id(image_id + 1) is None


def test_update_keeps_storage_date(sql_store):
    image_id = sql_store.insert_image(_fields())
    image = sql_store.get_image_by_id(image_id)
    changed = image.model_copy(
        update={"title": "Dusk", "storage_date": datetime(2000, 1, 1, tzinfo=timezone.utc)}
    )
    sql_store.update_image(image_id, changed)
    stored = sql_store.get_image_by_id(image_id)
    assert stored.title == "Dusk"
    assert stored.storage_date == NOW


def test_update_and_delete_missing_raise(sql_store):
    image = sql_store.get_image_by_id(sql_store.insert_image(_fields()))
    with pytest.raises(PersistenceError):
        sql_store.update_image(999, image)
    with pytest.raises(PersistenceError):
        sql_store.delete_image_by_id(999)


def test_queries(sql_store):
    first = sql_store.insert_image(_fields(title="one", author="Ann", keywords=["sea"]))
    second = sql_store.insert_image(
        _fields(title="two", author="Bob", keywords=["sea", "sky"], capture_date=date(2022, 1, 1))
    )

    assert [i.id for i in sql_store.get_all_images()] == [first, second]
    assert [i.id for i in sql_store.search_image_by_title("two")] == [second]
    assert [i.id for i in sql_store.get_image_by_author("Ann")] == [first]
    assert [i.id for i in sql_store.get_image_by_creation_date(date(2022, 1, 1))] == [second]
    assert [i.id for i in sql_store.get_image_by_keywords(["sea"])] == [first, second]
    assert [i.id for i in sql_store.get_image_by_keywords(["sea", "sky"])] == [second]

    sql_store.delete_image_by_id(first)
    assert [i.id for i in sql_store.get_all_images()] == [second]


def test_handler_over_sql_store(sql_store):
    handler = CatalogHandler(sql_store, TokenAuthorizer([TOKEN]), clock=lambda: NOW)
    created = handler.register(AUTH, "Sunset", "d", "nature,sky", "A", "C", "2023-05-01", "p")
    image_id = created.data["id"]

    handler.update(AUTH, str(image_id), author="B")
    assert sql_store.get_image_by_id(image_id).author == "B"

    assert handler.delete(AUTH, str(image_id), "WRONG").kind.value == "forbidden"
    handler.delete(AUTH, str(image_id), "C")
    assert sql_store.get_all_images() == []


def test_storage_date_from_non_utc_clock(sql_store):
    local_now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    handler = CatalogHandler(sql_store, TokenAuthorizer([TOKEN]), clock=lambda: local_now)
    image_id = handler.register(AUTH, "t", "d", "k", "a", "c", "2023-05-01", "p").data["id"]

    stored = sql_store.get_image_by_id(image_id).storage_date
    assert stored == local_now
    assert stored == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
