"""
Graph module for the Friendship API.

Provides the friendship graph storage and friend-degree traversal:
- User rows and directed friendship edges
- JSON persistence via NetworkX
- Exact-degree friend resolution
"""

from .schema import User, FriendEdge, create_user
from .store import GraphStore, StoreError, UniqueViolation, ForeignKeyViolation
from .resolver import FriendDegreeResolver, SUPPORTED_DEGREES

__all__ = [
    "User",
    "FriendEdge",
    "create_user",
    "GraphStore",
    "StoreError",
    "UniqueViolation",
    "ForeignKeyViolation",
    "FriendDegreeResolver",
    "SUPPORTED_DEGREES",
]
