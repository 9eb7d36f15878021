"""Frontend stack: S3 + CloudFront with a Lambda@Edge signing relay."""

import os

from aws_cdk import (
    CfnOutput,
    Fn,
    RemovalPolicy,
    Stack,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
    aws_ssm as ssm,
)
from constructs import Construct
from typing import Dict

from .backend_stack import PARAMETER_PREFIX

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
EDGE_AUTH_PATH = os.path.join(PROJECT_ROOT, "lambdas", "edge_auth")
FRONTEND_PATH = os.path.join(PROJECT_ROOT, "frontend")

FUNCTION_NAMES = ["GetBook", "GetBooks", "CreateBook", "UpdateBook", "DeleteBook"]

# CloudFront path pattern -> backend function, and whether the body is forwarded
BEHAVIORS = {
    "/getBook/*": ("GetBook", False),
    "/getBooks": ("GetBooks", False),
    "/createBook": ("CreateBook", True),
    "/updateBook/*": ("UpdateBook", True),
    "/deleteBook/*": ("DeleteBook", True),
}


class FrontendStack(Stack):
    """
    Frontend infrastructure stack (must be deployed in us-east-1).

    Components:
    - Lambda@Edge function that re-signs API requests for the Function URLs
    - Private S3 bucket for the single-page app, read through an OAI
    - Access log bucket for S3 and CloudFront
    - CloudFront distribution: S3 by default, one behaviour per book operation
    - Deployment of frontend/ into the bucket
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        env_name: str,
        **kwargs
    ):
        """
        Initialize frontend stack.

        Args:
            scope: CDK scope
            construct_id: Stack ID
            env_name: Environment name (dev/prod)
            **kwargs: Additional stack properties (env must target us-east-1)
        """
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = env_name

        # Function URLs and ARNs published by the backend stack
        self.function_urls = {
            name: self._get_parameter(f"{PARAMETER_PREFIX}/{name}Url") for name in FUNCTION_NAMES
        }
        self.function_arns = {
            name: self._get_parameter(f"{PARAMETER_PREFIX}/{name}Arn") for name in FUNCTION_NAMES
        }

        self._create_edge_function()
        self._create_buckets()
        self._create_distribution()
        self._create_deployment()
        self._create_outputs()

    def _get_parameter(self, parameter_name: str) -> str:
        """Read a String parameter from Parameter Store at deploy time."""
        construct_id = parameter_name.lower().replace("/", "", 1).replace("/", "-") + "Parameter"
        return ssm.StringParameter.from_string_parameter_name(
            self, construct_id, parameter_name
        ).string_value

    def _create_edge_function(self):
        """Create the Lambda@Edge relay allowed to invoke the Function URLs."""
        self.auth_function = cloudfront.experimental.EdgeFunction(
            self,
            "AuthFunctionAtEdge",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="auth.handler",
            code=lambda_.Code.from_asset(EDGE_AUTH_PATH, exclude=["tests", "__pycache__"]),
            description=f"Signs CloudFront requests to the book Function URLs - {self.env_name}",
        )

        self.auth_function.add_to_role_policy(
            iam.PolicyStatement(
                sid="AllowInvokeFunctionUrl",
                effect=iam.Effect.ALLOW,
                actions=["lambda:InvokeFunctionUrl"],
                resources=list(self.function_arns.values()),
                conditions={
                    "StringEquals": {"lambda:FunctionUrlAuthType": "AWS_IAM"},
                },
            )
        )

    def _create_buckets(self):
        """Create the frontend bucket and its access log bucket."""
        self.access_logs_bucket = s3.Bucket(
            self,
            "AccessLogsBucket",
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            object_ownership=s3.ObjectOwnership.BUCKET_OWNER_PREFERRED,
            enforce_ssl=True,
        )

        self.frontend_bucket = s3.Bucket(
            self,
            "FrontendBucket",
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            server_access_logs_bucket=self.access_logs_bucket,
            server_access_logs_prefix="FrontS3AccessLogs",
        )

        self.oai = cloudfront.OriginAccessIdentity(self, "OAI")
        self.frontend_bucket.grant_read(self.oai)

    def _create_distribution(self):
        """Create the CloudFront distribution and the API behaviours."""
        self.distribution = cloudfront.Distribution(
            self,
            "FrontendDistribution",
            comment="Books Distribution",
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_identity(
                    self.frontend_bucket,
                    origin_access_identity=self.oai,
                ),
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
            ),
            # Unknown paths fall back to the app
            error_responses=[
                cloudfront.ErrorResponse(
                    http_status=404,
                    response_page_path="/",
                    response_http_status=200,
                ),
            ],
            default_root_object="index.html",
            enable_logging=True,
            log_bucket=self.access_logs_bucket,
            # certificate: specify a custom certificate (from ACM)
        )

        for path_pattern, (name, include_body) in BEHAVIORS.items():
            self.distribution.add_behavior(
                path_pattern,
                self._function_url_origin(self.function_urls[name]),
                **self._behavior_options(include_body),
            )

    def _function_url_origin(self, function_url: str) -> origins.HttpOrigin:
        """Origin for a Function URL (https://<domain>/ -> <domain>)."""
        return origins.HttpOrigin(Fn.select(2, Fn.split("/", function_url)))

    def _behavior_options(self, include_body: bool) -> Dict:
        """Options shared by the API behaviours; mutating ones forward the body."""
        return {
            "viewer_protocol_policy": cloudfront.ViewerProtocolPolicy.HTTPS_ONLY,
            "cache_policy": cloudfront.CachePolicy.CACHING_DISABLED,
            "origin_request_policy": cloudfront.OriginRequestPolicy.CORS_CUSTOM_ORIGIN,
            "response_headers_policy": (
                cloudfront.ResponseHeadersPolicy.CORS_ALLOW_ALL_ORIGINS_WITH_PREFLIGHT_AND_SECURITY_HEADERS
            ),
            "edge_lambdas": [
                cloudfront.EdgeLambda(
                    function_version=self.auth_function.current_version,
                    event_type=cloudfront.LambdaEdgeEventType.ORIGIN_REQUEST,
                    include_body=include_body,
                )
            ],
            "allowed_methods": (
                cloudfront.AllowedMethods.ALLOW_ALL
                if include_body
                else cloudfront.AllowedMethods.ALLOW_GET_HEAD_OPTIONS
            ),
        }

    def _create_deployment(self):
        """Upload the single-page app and invalidate the distribution."""
        s3deploy.BucketDeployment(
            self,
            "FrontendAppDeploy",
            sources=[s3deploy.Source.asset(FRONTEND_PATH)],
            destination_bucket=self.frontend_bucket,
            distribution=self.distribution,
            distribution_paths=["/*"],
            retain_on_delete=True,
            memory_limit=1024,
        )

    def _create_outputs(self):
        """Create CloudFormation outputs."""
        domain = self.distribution.distribution_domain_name

        CfnOutput(
            self,
            "FrontendURL",
            value=f"https://{domain}/",
            description="Books single-page app",
        )

        for name in FUNCTION_NAMES:
            CfnOutput(self, f"{name}FunctionURL", value=self.function_urls[name])

        for path_pattern, (name, _) in BEHAVIORS.items():
            path = path_pattern.replace("*", "id")
            CfnOutput(self, f"{name}URL", value=f"https://{domain}{path}")
