"""
Base service class.
Services hold the pricing business rules; they keep no per-request state.
"""

from abc import ABC


class BaseService(ABC):
    """Base service class for all services."""
    pass
