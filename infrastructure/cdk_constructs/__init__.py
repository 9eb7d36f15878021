"""Reusable CDK Constructs."""

from .book_function import BookFunction
from .cross_region_parameter import CrossRegionParameter

__all__ = [
    "BookFunction",
    "CrossRegionParameter",
]
