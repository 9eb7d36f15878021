"""
DynamoDB persistence for books.

Table schema:
- Partition key: id (STRING)
- GSI "author": partition key author (STRING), sort key id (STRING)

Each operation is a single DynamoDB call (scan and query follow
LastEvaluatedKey). There is no conditional write: concurrent updates are
last-write-wins, and updating an unknown id creates the item.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from .config import BooksConfig
from .models import Book

logger = logging.getLogger(__name__)


class BookStore:
    """Book CRUD operations over a DynamoDB table.

    Attributes:
        table: boto3 DynamoDB Table resource
        author_index: Name of the GSI keyed by author
    """

    def __init__(self, table: Any, author_index: str = "author"):
        """
        Initialize the store.

        Args:
            table: boto3 DynamoDB Table resource
            author_index: Name of the GSI keyed by author
        """
        self.table = table
        self.author_index = author_index

    @classmethod
    def from_config(cls, config: BooksConfig) -> "BookStore":
        """Create a store with its own DynamoDB resource from configuration."""
        dynamodb = boto3.resource(
            "dynamodb",
            region_name=config.region,
            endpoint_url=config.dynamodb_endpoint_url,
        )
        logger.info(f"Initialized BookStore with table={config.table_name}")
        return cls(dynamodb.Table(config.table_name), author_index=config.author_index_name)

    def get_book(self, book_id: str) -> Optional[Book]:
        """
        Get one book by id.

        Returns:
            The book, or None if it does not exist
        """
        response = self.table.get_item(Key={"id": book_id})
        item = response.get("Item")
        if item is None:
            return None
        return Book.from_item(item)

    def get_books(self, author: Optional[str] = None) -> List[Book]:
        """
        List books, optionally restricted to one author.

        With an author the "author" GSI is queried, otherwise the whole table
        is scanned. Order is whatever DynamoDB returns.
        """
        if author:
            return self._collect(
                self.table.query,
                IndexName=self.author_index,
                KeyConditionExpression=Key("author").eq(author),
            )
        # TODO: replace the full scan with a bounded page protocol once the
        # frontend can pass a continuation token
        return self._collect(self.table.scan)

    def create_book(self, book: Book) -> Book:
        """
        Store a new book under a freshly generated id.

        Any id on the input is ignored.

        Returns:
            The stored book including its id
        """
        new_book = book.model_copy(update={"id": str(uuid.uuid4())})
        self.table.put_item(Item=new_book.to_item())
        logger.info(f"Created book {new_book.id}")
        return new_book

    def update_book(self, book: Book) -> Book:
        """
        Overwrite name, author and releaseDate of the book with ``book.id``.

        The id is not checked for existence; an unknown id is created.
        """
        self.table.update_item(
            Key={"id": book.id},
            UpdateExpression="set #name=:name, #author=:author, #releaseDate=:releaseDate",
            ExpressionAttributeNames={
                "#name": "name",
                "#author": "author",
                "#releaseDate": "releaseDate",
            },
            ExpressionAttributeValues={
                ":name": book.name,
                ":author": book.author,
                ":releaseDate": book.releaseDate,
            },
        )
        logger.info(f"Updated book {book.id}")
        return book

    def delete_book(self, book_id: str) -> bool:
        """
        Delete a book.

        Returns:
            True if DynamoDB accepted the delete, False on a client error
        """
        try:
            self.table.delete_item(Key={"id": book_id})
        except ClientError as e:
            logger.error(f"Error deleting book {book_id}: {str(e)}", exc_info=True)
            return False
        return True

    @staticmethod
    def _collect(operation, **kwargs) -> List[Book]:
        """Run a scan or query until LastEvaluatedKey is exhausted."""
        books: List[Book] = []
        while True:
            response: Dict[str, Any] = operation(**kwargs)
            books.extend(Book.from_item(item) for item in response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                return books
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
