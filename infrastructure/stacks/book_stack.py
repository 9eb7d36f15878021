"""Root stack: backend (nested) in the deployment region, frontend in us-east-1."""

from aws_cdk import Environment, Stack
from constructs import Construct
from typing import Any, Dict

from .backend_stack import BackendStack
from .frontend_stack import FrontendStack

# Lambda@Edge functions can only be created in us-east-1
EDGE_REGION = "us-east-1"


class BookStack(Stack):
    """
    Books application stack.

    Components:
    - BackendStack (nested): table, functions, Function URLs
    - FrontendStack: CloudFront, S3, Lambda@Edge, deployed after the backend
      because it reads the parameters the backend writes
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
        Initialize book stack.

        Args:
            scope: CDK app
            construct_id: Stack ID
            env_name: Environment name (dev/prod)
            env_config: Environment-specific configuration
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        self.backend = BackendStack(
            self,
            "backend",
            env_name=env_name,
            env_config=env_config,
        )

        self.frontend = FrontendStack(
            self,
            "frontend",
            env_name=env_name,
            env=Environment(
                account=Stack.of(self).account,
                region=EDGE_REGION,
            ),
        )
        self.frontend.add_dependency(self.backend)
