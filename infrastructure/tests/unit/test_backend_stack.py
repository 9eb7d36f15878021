"""Unit tests for BackendStack."""

import aws_cdk as cdk
from aws_cdk import assertions

from stacks.backend_stack import BackendStack


ENV_CONFIG = {
    "lambda_memory": 512,
    "lambda_timeout": 30,
    "log_retention_days": 7,
    "point_in_time_recovery": True,
}


def create_test_backend_stack():
    """Helper to create BackendStack inside a parent stack, without bundling."""
    app = cdk.App(context={"aws:cdk:bundling-stacks": []})
    parent = cdk.Stack(
        app,
        "TestParentStack",
        env=cdk.Environment(account="123456789012", region="eu-west-1"),
    )
    return BackendStack(parent, "backend", env_name="dev", env_config=ENV_CONFIG)


def test_backend_stack_creates_book_table():
    """Test that the books table has the id key and the author index."""
    stack = create_test_backend_stack()
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::DynamoDB::Table", 1)

    template.has_resource_properties(
        "AWS::DynamoDB::Table",
        {
            "BillingMode": "PAY_PER_REQUEST",
            "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
            "PointInTimeRecoverySpecification": {"PointInTimeRecoveryEnabled": True},
            "GlobalSecondaryIndexes": [
                assertions.Match.object_like({
                    "IndexName": "author",
                    "KeySchema": [
                        {"AttributeName": "author", "KeyType": "HASH"},
                        {"AttributeName": "id", "KeyType": "RANGE"},
                    ],
                }),
            ],
        },
    )


def test_backend_stack_creates_five_book_functions():
    """Test that one function exists per book operation."""
    stack = create_test_backend_stack()
    template = assertions.Template.from_stack(stack)

    for handler in [
        "books.handler.get_book_handler",
        "books.handler.get_books_handler",
        "books.handler.create_book_handler",
        "books.handler.update_book_handler",
        "books.handler.delete_book_handler",
    ]:
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {
                "Handler": handler,
                "Runtime": "python3.12",
                "MemorySize": 512,
                "Timeout": 30,
                "TracingConfig": {"Mode": "Active"},
                "Environment": {
                    "Variables": assertions.Match.object_like({
                        "TABLE_NAME": assertions.Match.any_value(),
                        "AUTHOR_INDEX_NAME": "author",
                    }),
                },
            },
        )

    book_functions = template.find_resources(
        "AWS::Lambda::Function",
        {"Properties": {"Handler": assertions.Match.string_like_regexp(r"^books\.handler\.")}},
    )
    assert len(book_functions) == 5


def test_backend_stack_creates_iam_function_urls():
    """Test that every function URL requires IAM auth with single-method CORS."""
    stack = create_test_backend_stack()
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::Lambda::Url", 5)

    for method in ["GET", "POST", "PUT", "DELETE"]:
        template.has_resource_properties(
            "AWS::Lambda::Url",
            {
                "AuthType": "AWS_IAM",
                "Cors": assertions.Match.object_like({
                    "AllowMethods": [method],
                    "AllowOrigins": ["*"],
                }),
            },
        )


def test_backend_stack_publishes_parameters_in_us_east_1():
    """Test that URL and ARN of each function are written to us-east-1."""
    stack = create_test_backend_stack()
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("Custom::AWS", 10)

    custom_resources = template.find_resources("Custom::AWS")
    create_calls = " ".join(
        str(resource["Properties"]["Create"]) for resource in custom_resources.values()
    )
    for name in ["GetBook", "GetBooks", "CreateBook", "UpdateBook", "DeleteBook"]:
        assert f"/books/{name}Url" in create_calls
        assert f"/books/{name}Arn" in create_calls
    assert "us-east-1" in create_calls


def test_backend_stack_outputs():
    """Test that stack creates required outputs."""
    stack = create_test_backend_stack()
    template = assertions.Template.from_stack(stack)

    template.has_output("BooksTableName", {})
    template.has_output("GetBook", {})
    template.has_output("GetBooks", {})
    template.has_output("CreateBook", {})
    template.has_output("UpdateBook", {})
    template.has_output("DeleteBook", {})
