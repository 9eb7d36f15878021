"""Exceptions raised by the book handlers and store."""


class BookError(Exception):
    """Base class for book errors."""
    pass


class InvalidBookError(BookError):
    """Raised when a request body cannot be parsed into a book."""
    pass


class BookNotFoundError(BookError):
    """Raised when a book id does not exist."""

    def __init__(self, book_id: str):
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id
