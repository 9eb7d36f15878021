"""CDK Stacks for the Books application."""

from .backend_stack import BackendStack
from .frontend_stack import FrontendStack
from .book_stack import BookStack

__all__ = [
    "BackendStack",
    "FrontendStack",
    "BookStack",
]
