"""
Shared fixtures for the book handler tests.

Uses moto to mock DynamoDB with the same schema the backend stack deploys.
"""

import json

import boto3
import pytest
from moto import mock_aws

from lambdas.books.store import BookStore


TABLE_NAME = "test-books"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake AWS credentials so boto3 never reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def books_table():
    """Create a mock books table with the author GSI."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {"AttributeName": "id", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "author", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": "author",
                    "KeySchema": [
                        {"AttributeName": "author", "KeyType": "HASH"},
                        {"AttributeName": "id", "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        yield table


@pytest.fixture
def store(books_table):
    """BookStore backed by the mock table."""
    return BookStore(books_table, author_index="author")


@pytest.fixture
def sample_book():
    """Book payload as sent by the create form."""
    return {"author": "A", "name": "N", "releaseDate": "2020-01-01"}


@pytest.fixture
def url_event():
    """Builder for Lambda Function URL (payload 2.0) events."""

    def build(method="GET", path="/", body=None, query=None, base64_encoded=False):
        event = {
            "version": "2.0",
            "routeKey": "$default",
            "rawPath": path,
            "rawQueryString": "&".join(f"{k}={v}" for k, v in (query or {}).items()),
            "headers": {"content-type": "application/json"},
            "requestContext": {
                "http": {
                    "method": method,
                    "path": path,
                    "protocol": "HTTP/1.1",
                    "sourceIp": "203.0.113.178",
                    "userAgent": "Amazon CloudFront",
                },
            },
            "isBase64Encoded": base64_encoded,
        }
        if query:
            event["queryStringParameters"] = query
        if body is not None:
            event["body"] = body if isinstance(body, str) else json.dumps(body)
        return event

    return build
