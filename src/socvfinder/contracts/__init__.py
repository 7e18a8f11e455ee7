"""Shared contracts for cross-boundary data types.

Import pattern:
    from socvfinder.contracts import User, StoreError, Notifier
"""

from socvfinder.contracts.errors import (
    DecodeError,
    EncodingError,
    SOCVFinderError,
    StoreError,
    TransportError,
    UninitializedServiceError,
)
from socvfinder.contracts.models import LoadResult, User
from socvfinder.contracts.protocols import Notifier

__all__ = [
    # errors
    "DecodeError",
    "EncodingError",
    "SOCVFinderError",
    "StoreError",
    "TransportError",
    "UninitializedServiceError",
    # models
    "LoadResult",
    "User",
    # protocols
    "Notifier",
]
