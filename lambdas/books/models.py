"""Book schema shared by the handlers, the store and the local tooling."""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InvalidBookError


class Book(BaseModel):
    """A book record as stored in DynamoDB and exchanged over HTTP.

    Attribute names match the JSON wire format (camelCase ``releaseDate``).
    ``id`` is only absent on a book that has not been created yet.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    author: str
    name: str
    releaseDate: str

    @field_validator("releaseDate")
    @classmethod
    def _check_release_date(cls, value: str) -> str:
        # Date pickers send "2020-01-01", JS Date.toJSON sends a trailing "Z"
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"releaseDate must be an ISO date, got {value!r}")
        return value

    def to_item(self) -> Dict[str, Any]:
        """Return the DynamoDB item for this book."""
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Book":
        """Build a book from a DynamoDB item."""
        return cls.model_validate(item)


def parse_book(body: Optional[Union[str, bytes]]) -> Book:
    """
    Parse a JSON request body into a Book.

    Args:
        body: Raw JSON body

    Returns:
        Book: Parsed book

    Raises:
        InvalidBookError: If the body is missing, not a JSON object, or
            fails validation
    """
    if not body:
        raise InvalidBookError("Request body is required")

    try:
        return Book.model_validate_json(body)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidBookError(f"Invalid book: {errors}") from e
