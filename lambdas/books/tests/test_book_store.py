"""
Unit tests for BookStore.

Uses moto to mock DynamoDB for testing without AWS infrastructure.
"""

from unittest.mock import Mock

from botocore.exceptions import ClientError

from lambdas.books.models import Book
from lambdas.books.store import BookStore


def make_book(author="A", name="N", release_date="2020-01-01", book_id=None):
    return Book(id=book_id, author=author, name=name, releaseDate=release_date)


class TestCreateBook:
    """Tests for create_book."""

    def test_create_generates_id(self, store):
        created = store.create_book(make_book())

        assert created.id
        assert created.author == "A"
        assert created.name == "N"
        assert created.releaseDate == "2020-01-01"

    def test_create_ids_are_distinct(self, store):
        ids = {store.create_book(make_book()).id for _ in range(20)}

        assert len(ids) == 20

    def test_create_ignores_client_id(self, store):
        created = store.create_book(make_book(book_id="chosen-by-client"))

        assert created.id != "chosen-by-client"

    def test_create_then_get_returns_same_fields(self, store):
        created = store.create_book(make_book())

        assert store.get_book(created.id) == created


class TestGetBook:
    """Tests for get_book."""

    def test_get_missing_book(self, store):
        assert store.get_book("does-not-exist") is None


class TestGetBooks:
    """Tests for get_books."""

    def test_get_all_books(self, store):
        created = [store.create_book(make_book(author=f"Author {i}")) for i in range(5)]

        books = store.get_books()

        assert sorted(b.id for b in books) == sorted(b.id for b in created)

    def test_get_books_empty_table(self, store):
        assert store.get_books() == []

    def test_get_books_by_author(self, store):
        tolkien = [store.create_book(make_book(author="Tolkien", name=f"T{i}")) for i in range(3)]
        for i in range(4):
            store.create_book(make_book(author="Herbert", name=f"H{i}"))

        books = store.get_books(author="Tolkien")

        assert sorted(b.id for b in books) == sorted(b.id for b in tolkien)
        assert all(b.author == "Tolkien" for b in books)

    def test_get_books_unknown_author(self, store):
        store.create_book(make_book(author="Tolkien"))

        assert store.get_books(author="Nobody") == []

    def test_scan_follows_pagination(self):
        table = Mock()
        table.scan.side_effect = [
            {"Items": [make_book(book_id="1").to_item()], "LastEvaluatedKey": {"id": "1"}},
            {"Items": [make_book(book_id="2").to_item()]},
        ]

        books = BookStore(table).get_books()

        assert [b.id for b in books] == ["1", "2"]
        assert table.scan.call_count == 2
        table.scan.assert_called_with(ExclusiveStartKey={"id": "1"})

    def test_query_follows_pagination(self):
        table = Mock()
        table.query.side_effect = [
            {"Items": [make_book(book_id="1").to_item()], "LastEvaluatedKey": {"id": "1", "author": "A"}},
            {"Items": []},
        ]

        books = BookStore(table, author_index="by-author").get_books(author="A")

        assert [b.id for b in books] == ["1"]
        assert table.query.call_args.kwargs["IndexName"] == "by-author"
        assert table.query.call_args.kwargs["ExclusiveStartKey"] == {"id": "1", "author": "A"}


class TestUpdateBook:
    """Tests for update_book."""

    def test_update_then_get(self, store):
        created = store.create_book(make_book())
        changed = make_book(author="B", name="M", release_date="2021-02-03", book_id=created.id)

        store.update_book(changed)

        assert store.get_book(created.id) == changed

    def test_update_unknown_id_creates_it(self, store):
        book = make_book(book_id="new-id")

        store.update_book(book)

        assert store.get_book("new-id") == book


class TestDeleteBook:
    """Tests for delete_book."""

    def test_delete_then_get(self, store):
        created = store.create_book(make_book())

        assert store.delete_book(created.id) is True
        assert store.get_book(created.id) is None

    def test_delete_client_error(self):
        table = Mock()
        table.delete_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "DeleteItem",
        )

        assert BookStore(table).delete_book("1") is False
