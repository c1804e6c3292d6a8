"""
Graph storage using NetworkX.

Holds users as nodes and friendship edges as directed ``friend_of -> friend``
arcs, with optional persistence to a JSON file.
"""

import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Any, Optional, List, Iterable, Iterator

import networkx as nx

from .schema import User, FriendEdge, utc_now

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for constraint signals raised by the store."""


class UniqueViolation(StoreError):
    """A unique column already holds the value."""

    def __init__(self, column: str, value: str):
        self.column = column
        self.value = value
        super().__init__(f"Duplicate value for {column}: {value}")


class ForeignKeyViolation(StoreError):
    """An edge references a user row that does not exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} does not exist")


class GraphStore:
    """
    NetworkX-based friendship graph with JSON persistence.

    Provides:
    - User row CRUD with email uniqueness
    - Directed edge insert/delete with composite uniqueness
    - Edge-fetch reads for traversal
    - Atomic writes: each mutation is applied under a lock and rolled back
      if persisting it fails
    - The file is replaced via a temp file, never rewritten in place

    Passing ``file_path=None`` keeps the graph in memory only.
    """

    def __init__(self, file_path: Optional[Path] = None):
        """
        Initialize graph store.

        Args:
            file_path: Path to JSON file for persistence (None for in-memory)
        """
        self.file_path = Path(file_path) if file_path else None
        self.graph = nx.DiGraph()
        self._emails: Dict[str, str] = {}
        self._lock = threading.RLock()
        if self.file_path:
            self._ensure_file()
            self._load()

    def _ensure_file(self):
        """Ensure storage directory exists."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self):
        """Load graph from JSON file."""
        if not self.file_path.exists():
            logger.info("No existing graph file, initializing empty graph")
            self._save()
            return

        try:
            with open(self.file_path, "r") as f:
                data = json.load(f)

            for user_data in data.get("users", []):
                user = User.from_dict(user_data)
                self.graph.add_node(user.id, **user.to_dict())
                self._emails[user.email] = user.id

            for edge_data in data.get("friends", []):
                edge = FriendEdge.from_dict(edge_data)
                if not (self.graph.has_node(edge.friend_of_id) and self.graph.has_node(edge.friend_id)):
                    logger.warning(
                        f"Skipping friendship edge {edge.friend_of_id} -> {edge.friend_id}: unknown user"
                    )
                    continue
                self.graph.add_edge(edge.friend_of_id, edge.friend_id)

            logger.info(
                f"Loaded graph: {self.graph.number_of_nodes()} users, "
                f"{self.graph.number_of_edges()} friendship edges"
            )

        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to load graph: {e}, initializing empty")
            self.graph = nx.DiGraph()
            self._emails = {}

    def _save(self):
        """Save graph to JSON file (no-op for in-memory stores)."""
        if not self.file_path:
            return

        users = [attrs for _, attrs in sorted(self.graph.nodes(data=True))]
        friends = [
            FriendEdge(friend_id=target, friend_of_id=source).to_dict()
            for source, target in sorted(self.graph.edges())
        ]

        data = {
            "users": users,
            "friends": friends,
            "metadata": {
                "version": "1.0",
                "updated_at": utc_now()
            }
        }

        self._write_json_atomic(data)

        logger.debug(f"Saved graph: {len(users)} users, {len(friends)} edges")

    def _write_json_atomic(self, data: Dict[str, Any]):
        """Write to a sibling temp file and swap it in, so the old file survives a failed write."""
        tmp = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.file_path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def save(self):
        """Explicitly save the graph to disk."""
        with self._lock:
            self._save()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Apply a mutation atomically, restoring the previous state on failure."""
        with self._lock:
            graph_backup = self.graph.copy()
            emails_backup = dict(self._emails)
            try:
                yield
                self._save()
            except Exception:
                self.graph = graph_backup
                self._emails = emails_backup
                raise

    # === User Operations ===

    def add_user(self, user: User) -> bool:
        """
        Insert a user row.

        Returns:
            True if added, False if the id already exists

        Raises:
            UniqueViolation: If the email is already taken
        """
        with self._transaction():
            if self.graph.has_node(user.id):
                return False
            if user.email in self._emails:
                raise UniqueViolation("email", user.email)

            self.graph.add_node(user.id, **user.to_dict())
            self._emails[user.email] = user.id
            return True

    def update_user(self, user_id: str, **changes: Any) -> Optional[User]:
        """
        Update columns of a user row and bump ``updated_at``.

        Returns:
            Updated user, or None if no row matched

        Raises:
            UniqueViolation: If the new email belongs to another user
        """
        with self._transaction():
            if not self.graph.has_node(user_id):
                return None

            attrs = self.graph.nodes[user_id]
            new_email = changes.get("email")
            if new_email is not None and new_email != attrs["email"]:
                owner = self._emails.get(new_email)
                if owner is not None and owner != user_id:
                    raise UniqueViolation("email", new_email)
                del self._emails[attrs["email"]]
                self._emails[new_email] = user_id

            attrs.update({k: v for k, v in changes.items() if v is not None})
            attrs["updated_at"] = utc_now()
            return User.from_dict(attrs)

    def delete_user(self, user_id: str) -> Optional[User]:
        """
        Delete a user row together with every edge that references it.

        Outgoing edges (where the user is ``friend_of_id``) and incoming edges
        (where the user is ``friend_id``) are removed explicitly before the
        row, all within one transaction.

        Returns:
            Deleted user, or None if no row matched
        """
        with self._transaction():
            if not self.graph.has_node(user_id):
                return None

            user = User.from_dict(self.graph.nodes[user_id])

            outgoing = list(self.graph.out_edges(user_id))
            incoming = list(self.graph.in_edges(user_id))
            self.graph.remove_edges_from(outgoing)
            self.graph.remove_edges_from(incoming)

            self.graph.remove_node(user_id)
            del self._emails[user.email]

            logger.debug(
                f"Deleted user {user_id} with {len(outgoing)} outgoing "
                f"and {len(incoming)} incoming edges"
            )
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user row by id."""
        with self._lock:
            if not self.graph.has_node(user_id):
                return None
            return User.from_dict(self.graph.nodes[user_id])

    def has_user(self, user_id: str) -> bool:
        """Check if a user row exists."""
        with self._lock:
            return self.graph.has_node(user_id)

    def get_users(self, user_ids: Iterable[str]) -> List[User]:
        """
        Fetch user rows for the given ids, ordered by id ascending.

        Ids without a row are skipped.
        """
        with self._lock:
            return [
                User.from_dict(self.graph.nodes[user_id])
                for user_id in sorted(set(user_ids))
                if self.graph.has_node(user_id)
            ]

    def list_users(self) -> List[User]:
        """All user rows ordered by id ascending."""
        with self._lock:
            return [User.from_dict(attrs) for _, attrs in sorted(self.graph.nodes(data=True))]

    # === Edge Operations ===

    def add_edges(self, edges: Iterable[FriendEdge]) -> int:
        """
        Insert directed edges in one transaction.

        Edges that already exist are skipped.

        Returns:
            Number of edges actually inserted

        Raises:
            ForeignKeyViolation: If an endpoint has no user row (nothing is inserted)
        """
        added = 0
        with self._transaction():
            for edge in edges:
                for user_id in (edge.friend_id, edge.friend_of_id):
                    if not self.graph.has_node(user_id):
                        raise ForeignKeyViolation(user_id)

                if self.graph.has_edge(edge.friend_of_id, edge.friend_id):
                    continue

                self.graph.add_edge(edge.friend_of_id, edge.friend_id)
                added += 1
        return added

    def remove_edges(self, edges: Iterable[FriendEdge]) -> int:
        """
        Delete directed edges in one transaction.

        Returns:
            Number of edges actually removed
        """
        removed = 0
        with self._transaction():
            for edge in edges:
                if self.graph.has_edge(edge.friend_of_id, edge.friend_id):
                    self.graph.remove_edge(edge.friend_of_id, edge.friend_id)
                    removed += 1
        return removed

    def has_edge(self, edge: FriendEdge) -> bool:
        """Check if a directed edge exists."""
        with self._lock:
            return self.graph.has_edge(edge.friend_of_id, edge.friend_id)

    def get_friend_ids(self, user_id: str) -> List[str]:
        """
        Ids of users ``u`` with an edge ``(friend_id=u, friend_of_id=user_id)``.

        Unknown users have no friends. Ordered by id ascending.
        """
        with self._lock:
            if not self.graph.has_node(user_id):
                return []
            return sorted(self.graph.successors(user_id))

    def get_edges(self, user_id: str) -> List[FriendEdge]:
        """All edges where the user appears on either side."""
        with self._lock:
            if not self.graph.has_node(user_id):
                return []
            edges = [
                FriendEdge(friend_id=target, friend_of_id=source)
                for source, target in self.graph.out_edges(user_id)
            ]
            edges.extend(
                FriendEdge(friend_id=target, friend_of_id=source)
                for source, target in self.graph.in_edges(user_id)
            )
            return edges

    # === Statistics ===

    def stats(self) -> Dict[str, Any]:
        """Get graph statistics."""
        with self._lock:
            return {
                "total_users": self.graph.number_of_nodes(),
                "total_edges": self.graph.number_of_edges(),
                "persistent": self.file_path is not None
            }
