"""Service clients built on the transport."""

from .listing import PaginatedLister

__all__ = ["PaginatedLister"]
