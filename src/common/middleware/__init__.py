"""Common middleware for etickets."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
