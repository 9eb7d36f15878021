"""
HTTP client for the book endpoints.

Talks to the CloudFront distribution (or the local server) using the same
paths as the single-page app:

    GET    /getBook/{id}
    GET    /getBooks[?author=]
    POST   /createBook
    PUT    /updateBook/{id}
    DELETE /deleteBook/{id}
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import requests

from lambdas.books.errors import BookError, BookNotFoundError
from lambdas.books.models import Book

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
JSON_HEADERS = {"Content-Type": "application/json"}


class BooksApiError(BookError):
    """Raised when an endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class BooksClient:
    """
    Client for the book endpoints.

    Usage:
        client = BooksClient("https://d111111abcdef8.cloudfront.net")
        book = client.create_book(Book(author="A", name="N", releaseDate="2020-01-01"))
        client.delete_book(book.id)
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        """
        Initialize the client.

        Args:
            base_url: Distribution or local server URL
            session: requests session to reuse (a new one by default)
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not response.ok:
            raise BooksApiError(response.status_code, _error_message(response))
        return response

    def get_book(self, book_id: str) -> Book:
        """
        Fetch one book.

        Raises:
            BookNotFoundError: If the id does not exist
        """
        try:
            response = self._request("GET", f"/getBook/{book_id}")
        except BooksApiError as e:
            if e.status_code == 404:
                raise BookNotFoundError(book_id) from e
            raise
        return Book.model_validate(response.json())

    def get_books(self, author: Optional[str] = None) -> List[Book]:
        """Fetch all books, or only those of one author."""
        params = {"author": author} if author else None
        response = self._request("GET", "/getBooks", params=params)
        return [Book.model_validate(item) for item in response.json()]

    def create_book(self, book: Book) -> Book:
        """Create a book and return it with its generated id."""
        response = self._request(
            "POST",
            "/createBook",
            data=book.model_dump_json(exclude_none=True),
            headers=JSON_HEADERS,
        )
        return Book.model_validate(response.json())

    def update_book(self, book: Book) -> Book:
        """Overwrite the book with ``book.id``."""
        if not book.id:
            raise ValueError("Cannot update a book without an id")
        response = self._request(
            "PUT",
            f"/updateBook/{book.id}",
            data=book.model_dump_json(),
            headers=JSON_HEADERS,
        )
        return Book.model_validate(response.json())

    def delete_book(self, book_id: str) -> None:
        """
        Delete a book.

        Raises:
            BooksApiError: 400 if the backend could not delete it
        """
        self._request("DELETE", f"/deleteBook/{book_id}")

    def save_book(self, book: Book) -> Book:
        """Update the book if it has an id, create it otherwise (the edit form's submit)."""
        if book.id:
            return self.update_book(book)
        return self.create_book(book)


def paginate(books: Sequence[Book], page: int, page_size: int = PAGE_SIZE) -> Tuple[List[Book], int]:
    """
    Return one page of books (1-based) and the number of pages.

    Paging is client-side only; the backend always returns every book.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    page_count = max(1, math.ceil(len(books) / page_size))
    start = (page - 1) * page_size
    return list(books[start:start + page_size]), page_count


def _error_message(response: requests.Response) -> str:
    """Extract {"message": ...} from an error response, falling back to the text."""
    try:
        return response.json().get("message", response.text)
    except (ValueError, AttributeError):
        return response.text
