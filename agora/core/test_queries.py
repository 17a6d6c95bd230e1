# agora/core/test_queries.py
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import mongomock
import pytest
from pymongo.errors import ExecutionTimeout

from agora.core.exceptions import InvalidRequestError, QueryTimeoutError
from agora.core.queries import PageQuery, parse_page, deadline_ms, ASCENDING, DESCENDING


@pytest.fixture
def posts():
    collection = mongomock.MongoClient()['agora_test'].posts
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(7):
        collection.insert_one({"post_id": f"p{i}", "author": "a" if i % 2 else "b", "created_at": base + timedelta(minutes=i)})
    return collection


def test_page_query_is_immutable():
    base = PageQuery(page=2, page_size=5)
    filtered = base.where("author", "a").order_by("created_at")

    assert base.criteria == () and base.sort == ()
    assert filtered.criteria == (("author", "a"),)
    assert filtered.sort == (("created_at", DESCENDING),)
    assert filtered.skip == 5


def test_pages_are_disjoint_and_ordered(posts):
    query = PageQuery(page_size=3).order_by("created_at", ASCENDING)
    pages = [PageQuery(page=p, page_size=3, sort=query.sort).fetch(posts) for p in (1, 2, 3)]

    ids = [doc['post_id'] for page in pages for doc in page]
    assert ids == [f"p{i}" for i in range(7)]
    assert [len(page) for page in pages] == [3, 3, 1]


def test_criteria_and_hidden_object_id(posts):
    docs = PageQuery(page_size=10).where("author", "a").order_by("created_at").fetch(posts)

    assert [doc['post_id'] for doc in docs] == ["p5", "p3", "p1"]
    assert all("_id" not in doc for doc in docs)


def test_zero_page_size_returns_everything(posts):
    assert len(PageQuery(page_size=0).fetch(posts)) == 7


@pytest.mark.parametrize("raw, expected", [("1", 1), ("12", 12), (3, 3)])
def test_parse_page(raw, expected):
    assert parse_page(raw) == expected


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "", None, "1.5"])
def test_parse_page_rejects_invalid(raw):
    with pytest.raises(InvalidRequestError):
        parse_page(raw)


def test_deadline_is_applied_to_cursor():
    collection = MagicMock()
    cursor = collection.find.return_value
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor

    PageQuery(page_size=5, max_time_ms=deadline_ms(2)).order_by("created_at").apply(collection)

    cursor.max_time_ms.assert_called_once_with(2000)


def test_no_deadline_by_default():
    collection = MagicMock()
    cursor = collection.find.return_value
    cursor.limit.return_value = cursor

    PageQuery(page_size=5).apply(collection)

    cursor.max_time_ms.assert_not_called()


def test_server_timeout_becomes_query_timeout():
    collection = MagicMock()
    collection.name = "posts"
    cursor = collection.find.return_value
    cursor.limit.return_value = cursor
    cursor.max_time_ms.return_value = cursor
    cursor.__iter__.side_effect = ExecutionTimeout("operation exceeded time limit", 50)

    with pytest.raises(QueryTimeoutError):
        PageQuery(page_size=5, max_time_ms=2000).fetch(collection)
