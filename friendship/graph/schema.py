"""
Graph schema definitions.

Defines the two relations held by the store: user rows (nodes) and
directed friendship edges.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class User:
    """User row."""
    id: str
    name: str
    email: str
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            created_at=data.get("created_at", utc_now()),
            updated_at=data.get("updated_at", utc_now())
        )


@dataclass(frozen=True)
class FriendEdge:
    """
    Directed friendship edge.

    ``friend_id`` is a friend of ``friend_of_id``. Traversal hops go from
    ``friend_of_id`` to ``friend_id``.
    """
    friend_id: str
    friend_of_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "friend_id": self.friend_id,
            "friend_of_id": self.friend_of_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FriendEdge":
        return cls(
            friend_id=data["friend_id"],
            friend_of_id=data["friend_of_id"]
        )


def create_user(
    name: str,
    email: str,
    user_id: Optional[str] = None
) -> User:
    """Create a User row with a fresh UUID and timestamps."""
    now = utc_now()
    return User(
        id=user_id or str(uuid.uuid4()),
        name=name,
        email=email,
        created_at=now,
        updated_at=now
    )
