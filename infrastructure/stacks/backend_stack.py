"""Backend stack: DynamoDB book table + one Lambda Function URL per operation."""

import os

from aws_cdk import (
    BundlingOptions,
    CfnOutput,
    Duration,
    NestedStack,
    RemovalPolicy,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
    aws_logs as logs,
)
from constructs import Construct
from typing import Any, Dict

from cdk_constructs import BookFunction, CrossRegionParameter

# lambdas/ holds the "books" package the handlers are imported from
LAMBDAS_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "lambdas")

PARAMETER_PREFIX = "/books"


class BackendStack(NestedStack):
    """
    Backend infrastructure stack.

    Components:
    - DynamoDB table (partition key id) with an "author" GSI sorted by id
    - 5 Lambda functions, each with an AWS_IAM Function URL:
      1. GetBook    - GET    (read access)
      2. GetBooks   - GET    (read access)
      3. CreateBook - POST   (write access)
      4. UpdateBook - PUT    (write access)
      5. DeleteBook - DELETE (write access)
    - URL and ARN of every function published to Parameter Store in
      us-east-1, where the frontend stack reads them
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        env_name: str,
        env_config: Dict[str, Any] = None,
        **kwargs
    ):
        """
        Initialize backend stack.

        Args:
            scope: Parent stack
            construct_id: Stack ID
            env_name: Environment name (dev/prod)
            env_config: Environment-specific configuration
            **kwargs: Additional nested stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = env_name
        self.env_config = env_config or {}

        # Create DynamoDB table
        self._create_book_table()

        # Create Lambda functions
        self.code = self._create_function_code()
        self.function_env = {
            "TABLE_NAME": self.book_table.table_name,
            "AUTHOR_INDEX_NAME": "author",
        }

        self.get_book = self._create_book_function(
            "GetBook",
            handler="books.handler.get_book_handler",
            method=lambda_.HttpMethod.GET,
            description="Retrieve a book with its id",
        )
        self.get_books = self._create_book_function(
            "GetBooks",
            handler="books.handler.get_books_handler",
            method=lambda_.HttpMethod.GET,
            description="Retrieve all books, or the books of one author",
        )
        self.create_book = self._create_book_function(
            "CreateBook",
            handler="books.handler.create_book_handler",
            method=lambda_.HttpMethod.POST,
            description="Create a new book",
        )
        self.update_book = self._create_book_function(
            "UpdateBook",
            handler="books.handler.update_book_handler",
            method=lambda_.HttpMethod.PUT,
            description="Update an existing book",
        )
        self.delete_book = self._create_book_function(
            "DeleteBook",
            handler="books.handler.delete_book_handler",
            method=lambda_.HttpMethod.DELETE,
            description="Delete a book",
        )

        # Grant permissions
        self.book_table.grant_read_data(self.get_book.function)
        self.book_table.grant_read_data(self.get_books.function)
        self.book_table.grant_write_data(self.create_book.function)
        self.book_table.grant_write_data(self.update_book.function)
        self.book_table.grant_write_data(self.delete_book.function)

        self.all_functions = {
            "GetBook": self.get_book,
            "GetBooks": self.get_books,
            "CreateBook": self.create_book,
            "UpdateBook": self.update_book,
            "DeleteBook": self.delete_book,
        }

        # Stack outputs and cross-region parameters
        self._create_outputs()

    def _get_log_retention(self, days: int) -> logs.RetentionDays:
        """Convert integer days to RetentionDays enum."""
        retention_map = {
            1: logs.RetentionDays.ONE_DAY,
            3: logs.RetentionDays.THREE_DAYS,
            7: logs.RetentionDays.ONE_WEEK,
            14: logs.RetentionDays.TWO_WEEKS,
            30: logs.RetentionDays.ONE_MONTH,
            90: logs.RetentionDays.THREE_MONTHS,
        }
        return retention_map.get(days, logs.RetentionDays.ONE_WEEK)

    def _create_book_table(self):
        """Create DynamoDB table for books."""
        self.book_table = dynamodb.Table(
            self,
            "BooksTable",
            partition_key=dynamodb.Attribute(
                name="id",
                type=dynamodb.AttributeType.STRING,
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            point_in_time_recovery=self.env_config.get("point_in_time_recovery", True),
            removal_policy=RemovalPolicy.RETAIN if self.env_name == "prod" else RemovalPolicy.DESTROY,
        )

        # Global Secondary Index for listing the books of one author
        self.book_table.add_global_secondary_index(
            index_name="author",
            partition_key=dynamodb.Attribute(
                name="author",
                type=dynamodb.AttributeType.STRING,
            ),
            sort_key=dynamodb.Attribute(
                name="id",
                type=dynamodb.AttributeType.STRING,
            ),
        )

    def _create_function_code(self) -> lambda_.Code:
        """Package the books handlers with their pip dependencies."""
        return lambda_.Code.from_asset(
            LAMBDAS_PATH,
            exclude=["**/tests", "**/__pycache__", "edge_auth"],
            bundling=BundlingOptions(
                image=lambda_.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash",
                    "-c",
                    "pip install -r books/requirements.txt -t /asset-output && cp -au books /asset-output/",
                ],
            ),
        )

    def _create_book_function(
        self,
        name: str,
        *,
        handler: str,
        method: lambda_.HttpMethod,
        description: str,
    ) -> BookFunction:
        """Create one book operation function with its Function URL."""
        return BookFunction(
            self,
            f"{name}Function",
            handler=handler,
            code=self.code,
            method=method,
            timeout=Duration.seconds(self.env_config.get("lambda_timeout", 30)),
            memory_size=self.env_config.get("lambda_memory", 512),
            environment=self.function_env,
            log_retention=self._get_log_retention(self.env_config.get("log_retention_days", 7)),
            description=description,
        )

    def _create_outputs(self):
        """Create CloudFormation outputs and publish URLs for the frontend."""
        CfnOutput(
            self,
            "BooksTableName",
            value=self.book_table.table_name,
            description="DynamoDB books table name",
        )

        self.parameters = []
        for name, book_function in self.all_functions.items():
            CfnOutput(
                self,
                name,
                value=book_function.url.url,
                description=name,
            )

            self.parameters.append(CrossRegionParameter(
                self,
                f"{name}UrlParameter",
                parameter_name=f"{PARAMETER_PREFIX}/{name}Url",
                value=book_function.url.url,
                description=f"URL for {name} function",
            ))
            self.parameters.append(CrossRegionParameter(
                self,
                f"{name}ArnParameter",
                parameter_name=f"{PARAMETER_PREFIX}/{name}Arn",
                value=book_function.url.function_arn,
                description=f"ARN for {name} function",
            ))
