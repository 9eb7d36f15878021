"""
Configuration for the book handlers.

Values come from the Lambda environment set by the backend stack:
- TABLE_NAME: DynamoDB table holding the books (required)
- AUTHOR_INDEX_NAME: GSI keyed by author (default: author)
- AWS_REGION: set by the Lambda runtime
- DYNAMODB_ENDPOINT_URL: optional override for DynamoDB Local
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BooksConfig(BaseSettings):
    """Settings for the book store, read once per process."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    table_name: str = Field(validation_alias="TABLE_NAME")
    author_index_name: str = Field("author", validation_alias="AUTHOR_INDEX_NAME")
    region: Optional[str] = Field(None, validation_alias="AWS_REGION")
    dynamodb_endpoint_url: Optional[str] = Field(None, validation_alias="DYNAMODB_ENDPOINT_URL")


@lru_cache(maxsize=1)
def get_config() -> BooksConfig:
    """
    Get the process-wide BooksConfig (cached).

    Raises:
        pydantic.ValidationError: If TABLE_NAME is not set
    """
    return BooksConfig()
