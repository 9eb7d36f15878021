"""Unit tests for BookStack."""

import aws_cdk as cdk
from aws_cdk import assertions

from stacks.book_stack import BookStack


def test_book_stack_nests_backend_and_pins_frontend_to_us_east_1():
    """Test stack composition and the Lambda@Edge region."""
    app = cdk.App(context={"aws:cdk:bundling-stacks": []})

    stack = BookStack(
        app,
        "TestBookStack",
        env=cdk.Environment(account="123456789012", region="eu-west-1"),
        env_name="dev",
        env_config={"lambda_memory": 512, "lambda_timeout": 30, "log_retention_days": 7},
    )

    template = assertions.Template.from_stack(stack)
    template.resource_count_is("AWS::CloudFormation::Stack", 1)

    assert stack.frontend.region == "us-east-1"
    assert stack.frontend.account == "123456789012"
