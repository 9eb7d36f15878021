"""
Book CRUD Lambda handlers.

Each handler sits behind its own IAM-protected Lambda Function URL and is
reached through CloudFront, where the edge relay strips the operation name
from the path:

    /getBook/{id}      -> get_book_handler     GET     /{id}
    /getBooks          -> get_books_handler    GET     /?author=
    /createBook        -> create_book_handler  POST    /
    /updateBook/{id}   -> update_book_handler  PUT     /{id}
    /deleteBook/{id}   -> delete_book_handler  DELETE  /{id}

Events use the Function URL payload format 2.0. Responses are JSON; errors
carry {"message": ...}. Unhandled exceptions are left to the Lambda runtime.
"""

import base64
import json
import logging
from functools import lru_cache
from typing import Any, Dict, Optional
from urllib.parse import unquote

from .config import get_config
from .errors import InvalidBookError
from .models import parse_book
from .store import BookStore

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

JSON_HEADERS = {"Content-Type": "application/json"}


@lru_cache(maxsize=1)
def get_store() -> BookStore:
    """
    Get the BookStore for this process (created on first use).

    Raises:
        pydantic.ValidationError: If TABLE_NAME is not set
    """
    return BookStore.from_config(get_config())


def success(body: Any) -> Dict[str, Any]:
    """Return a successful JSON response."""
    return {
        "statusCode": 200,
        "headers": JSON_HEADERS,
        "body": json.dumps(body),
    }


def error(status_code: int, message: str) -> Dict[str, Any]:
    """Return a failed JSON response."""
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS,
        "body": json.dumps({"message": message}),
    }


def preflight(method: str) -> Dict[str, Any]:
    """Answer a CORS preflight for an endpoint supporting one method."""
    return {
        "statusCode": 204,
        "headers": {
            "Allow": method,
            "Access-Control-Allow-Methods": method,
        },
    }


def get_method(event: Dict[str, Any]) -> str:
    """Extract the HTTP method from a Function URL event."""
    return event.get("requestContext", {}).get("http", {}).get("method", "GET").upper()


def get_path_id(event: Dict[str, Any]) -> str:
    """Return the decoded book id from a path like ``/1234`` (leading slash dropped)."""
    return unquote(event.get("rawPath", "/")[1:])


def get_body(event: Dict[str, Any]) -> Optional[str]:
    """Return the request body, decoding it when the URL delivered base64."""
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        return base64.b64decode(body).decode("utf-8")
    return body


def get_book_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Return one book, or 404."""
    logger.info(f"Event: {json.dumps(event)}")

    book_id = get_path_id(event)
    book = get_store().get_book(book_id)
    if book is None:
        return error(404, f"Book {book_id} not found")
    return success(book.model_dump(exclude_none=True))


def get_books_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Return all books, or only those of the ``author`` query parameter."""
    logger.info(f"Event: {json.dumps(event)}")

    author = (event.get("queryStringParameters") or {}).get("author")
    books = get_store().get_books(author)
    return success([book.model_dump(exclude_none=True) for book in books])


def create_book_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Create a book and return it with its generated id."""
    logger.info(f"Event: {json.dumps(event)}")

    if get_method(event) == "OPTIONS":
        return preflight("POST")

    try:
        book = parse_book(get_body(event))
    except InvalidBookError as e:
        return error(400, str(e))

    book = get_store().create_book(book)
    return success(book.model_dump(exclude_none=True))


def update_book_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Overwrite a book; the body id must match the path id."""
    logger.info(f"Event: {json.dumps(event)}")

    if get_method(event) == "OPTIONS":
        return preflight("PUT")

    book_id = get_path_id(event)
    try:
        book = parse_book(get_body(event))
    except InvalidBookError as e:
        return error(400, str(e))

    if book.id != book_id:
        return error(400, "Two different book IDs given!")

    updated_book = get_store().update_book(book)
    return success(updated_book.model_dump(exclude_none=True))


def delete_book_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Delete a book; any store failure is reported as 400."""
    logger.info(f"Event: {json.dumps(event)}")

    if get_method(event) == "OPTIONS":
        return preflight("DELETE")

    book_id = get_path_id(event)
    if get_store().delete_book(book_id):
        return success({})
    return error(400, "Couldn't delete")
