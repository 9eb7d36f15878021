#!/usr/bin/env python3
"""
CDK Application for the Books sample.

Deploys the book table, the five Function URLs, and the CloudFront frontend
with its Lambda@Edge signing relay, checked against the cdk-nag AwsSolutions
rules.

Usage:
    cdk synth --context env=dev
    cdk deploy --context env=dev --all
    cdk destroy --context env=dev --all

Environment: dev or prod (default: dev)
"""

import os
from aws_cdk import App, Aspects, Environment, Tags
from cdk_nag import AwsSolutionsChecks, NagPackSuppression, NagSuppressions

from stacks.book_stack import BookStack

# Initialize CDK app
app = App()

# Get environment from context or environment variable
env_name = app.node.try_get_context("env") or os.getenv("CDK_ENV", "dev")

# Get environment configuration
env_config = (app.node.try_get_context("environments") or {}).get(env_name)

if not env_config:
    raise ValueError(
        f"Environment '{env_name}' not found in cdk.json context. "
        "Available: dev, prod"
    )

aws_env = Environment(
    account=os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=os.getenv("CDK_DEFAULT_REGION"),
)

print(f"Deploying to environment: {env_name}")

book_stack = BookStack(
    app,
    "BookStack",
    env=aws_env,
    env_name=env_name,
    env_config=env_config,
    description=f"Books sample - {env_name}",
)

# ============================================================================
# cdk-nag checks and accepted findings
# ============================================================================

Aspects.of(app).add(AwsSolutionsChecks())

NagSuppressions.add_stack_suppressions(
    book_stack,
    [
        NagPackSuppression(
            id="AwsSolutions-IAM4",
            reason="default AWSLambdaBasicExecutionRole",
            applies_to=[
                "Policy::arn:<AWS::Partition>:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
            ],
        ),
        NagPackSuppression(
            id="AwsSolutions-L1",
            reason="Runtimes of CDK-managed singleton functions (custom resources, "
                   "bucket deployment, log retention) are not configurable",
        ),
        NagPackSuppression(
            id="AwsSolutions-IAM5",
            reason="Resource:* is for X-Ray and CDK-managed singleton functions; "
                   "table access is granted on the books table and its indexes only",
        ),
    ],
    True,
)

NagSuppressions.add_resource_suppressions(
    book_stack.frontend.distribution,
    [
        NagPackSuppression(
            id="AwsSolutions-CFR4",
            reason="The sample does not come with a certificate, "
                   "documented that the user should use a custom certificate",
        ),
    ],
)

# ============================================================================
# Add Common Tags
# ============================================================================

Tags.of(app).add("Environment", env_name)
Tags.of(app).add("Project", "books")
Tags.of(app).add("ManagedBy", "CDK")

# ============================================================================
# Synthesize CloudFormation Templates
# ============================================================================

app.synth()
