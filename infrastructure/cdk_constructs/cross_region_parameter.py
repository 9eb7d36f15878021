"""SSM parameter written into another region through a custom resource."""

from aws_cdk import (
    Stack,
    custom_resources as cr,
)
from constructs import Construct


class CrossRegionParameter(Construct):
    """
    AWS Systems Manager String parameter created in a fixed region.

    CloudFormation can only create parameters in the stack's own region. The
    frontend (Lambda@Edge) stack lives in us-east-1, so the backend publishes
    its Function URLs there with PutParameter calls from an AwsCustomResource.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        parameter_name: str,
        value: str,
        description: str,
        region: str = "us-east-1",
    ):
        """
        Initialize the parameter.

        Args:
            scope: CDK scope
            construct_id: Construct identifier
            parameter_name: Parameter name (e.g., /books/GetBookUrl)
            value: Parameter value (may be a token)
            description: Parameter description
            region: Region the parameter is written to
        """
        super().__init__(scope, construct_id)

        self.parameter_name = parameter_name
        self.region = region

        put_parameter = cr.AwsSdkCall(
            service="SSM",
            action="putParameter",
            parameters={
                "Name": parameter_name,
                "Value": value,
                "Type": "String",
                "Description": description,
                "Overwrite": True,
            },
            region=region,
            physical_resource_id=cr.PhysicalResourceId.of(f"parameter{parameter_name}"),
        )

        self.resource = cr.AwsCustomResource(
            self,
            "Resource",
            on_create=put_parameter,
            on_update=put_parameter,
            on_delete=cr.AwsSdkCall(
                service="SSM",
                action="deleteParameter",
                parameters={"Name": parameter_name},
                region=region,
            ),
            policy=cr.AwsCustomResourcePolicy.from_sdk_calls(
                resources=[self.parameter_arn]
            ),
            install_latest_aws_sdk=False,
        )

    @property
    def parameter_arn(self) -> str:
        """Get parameter ARN."""
        account = Stack.of(self).account
        return f"arn:aws:ssm:{self.region}:{account}:parameter{self.parameter_name}"
