"""Book CRUD Lambda function exposed through an IAM-protected Function URL."""

from aws_cdk import (
    Duration,
    aws_lambda as lambda_,
    aws_logs as logs,
)
from constructs import Construct
from typing import Dict, Optional


class BookFunction(Construct):
    """
    One book operation: a Python Lambda plus its Function URL.

    Features:
    - X-Ray tracing and CloudWatch log retention
    - Function URL with AWS_IAM auth (only the edge relay can invoke it)
    - CORS restricted to the single method the operation serves
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        handler: str,
        code: lambda_.Code,
        method: lambda_.HttpMethod,
        timeout: Duration,
        memory_size: int,
        environment: Optional[Dict[str, str]] = None,
        log_retention: logs.RetentionDays = logs.RetentionDays.ONE_WEEK,
        description: Optional[str] = None,
        runtime: lambda_.Runtime = lambda_.Runtime.PYTHON_3_12,
        **kwargs
    ):
        """
        Initialize the book function construct.

        Args:
            scope: CDK scope
            construct_id: Construct identifier
            handler: Function handler (e.g. books.handler.get_book_handler)
            code: Lambda code
            method: HTTP method allowed by the URL's CORS configuration
            timeout: Function timeout
            memory_size: Memory allocation in MB
            environment: Environment variables
            log_retention: CloudWatch log retention
            description: Function description
            runtime: Lambda runtime
            **kwargs: Additional Lambda function properties
        """
        super().__init__(scope, construct_id)

        self.function = lambda_.Function(
            self,
            "Function",
            runtime=runtime,
            handler=handler,
            code=code,
            timeout=timeout,
            memory_size=memory_size,
            environment=environment or {},
            description=description,
            tracing=lambda_.Tracing.ACTIVE,
            log_retention=log_retention,
            **kwargs
        )

        # Non-GET methods need an uncached preflight
        cors_max_age = None if method == lambda_.HttpMethod.GET else Duration.seconds(0)

        self.url = self.function.add_function_url(
            auth_type=lambda_.FunctionUrlAuthType.AWS_IAM,
            cors=lambda_.FunctionUrlCorsOptions(
                allowed_origins=["*"],
                allowed_methods=[method],
                allowed_headers=["*"],
                allow_credentials=True,
                max_age=cors_max_age,
            ),
        )
