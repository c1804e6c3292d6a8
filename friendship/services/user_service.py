"""
User service.

CRUD on users, friendship linking, and friend lookups by degree.
Store constraint signals are translated into domain errors here and raw
storage faults are wrapped, so nothing below this layer leaks to callers.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..errors import (
    FriendshipError,
    FriendshipNotFoundError,
    InvalidFriendshipError,
    StorageFailureError,
    UniqueConstraintViolationError,
    UserNotFoundError,
)
from ..graph import User, FriendEdge, create_user, UniqueViolation, ForeignKeyViolation
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Service for users and their friendships.

    Provides:
    - User create/list/get/update/delete
    - Bidirectional friend linking and unlinking
    - Friend lookup at degree 1, 2 or 3
    """

    @contextmanager
    def _storage_guard(self, operation: str) -> Iterator[None]:
        """Wrap any non-domain exception raised inside into StorageFailureError."""
        try:
            yield
        except FriendshipError:
            raise
        except Exception as e:
            logger.error(f"Storage failure during {operation}: {e}", exc_info=True)
            raise StorageFailureError(e, operation=operation) from e

    # === User Operations ===

    def create(self, name: str, email: str) -> User:
        """
        Create a new user.

        Raises:
            UniqueConstraintViolationError: If the email is already in use
            StorageFailureError: On any storage fault
        """
        user = create_user(name=name, email=email)

        with self._storage_guard("create_user"):
            try:
                self.store.add_user(user)
            except UniqueViolation as e:
                raise UniqueConstraintViolationError(email) from e

        logger.info(f"Created user: {user.id}")
        return user

    def find(self) -> List[User]:
        """List all users ordered by id."""
        with self._storage_guard("find_users"):
            return self.store.list_users()

    def find_one(self, user_id: str) -> User:
        """
        Get a user by id.

        Raises:
            UserNotFoundError: If no user has this id
        """
        with self._storage_guard("find_user"):
            user = self.store.get_user(user_id)

        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def update(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None
    ) -> User:
        """
        Update a user's name and/or email.

        Fields left as None are unchanged.

        Raises:
            UserNotFoundError: If no user has this id
            UniqueConstraintViolationError: If the email belongs to another user
        """
        with self._storage_guard("update_user"):
            try:
                user = self.store.update_user(user_id, name=name, email=email)
            except UniqueViolation as e:
                raise UniqueConstraintViolationError(email) from e

        if user is None:
            raise UserNotFoundError(user_id)

        logger.debug(f"Updated user: {user_id}")
        return user

    def delete(self, user_id: str) -> User:
        """
        Delete a user and every friendship edge referencing it.

        Returns:
            The deleted user

        Raises:
            UserNotFoundError: If no user has this id
        """
        with self._storage_guard("delete_user"):
            user = self.store.delete_user(user_id)

        if user is None:
            raise UserNotFoundError(user_id)

        logger.info(f"Deleted user: {user_id}")
        return user

    # === Friendship Operations ===

    def add_friend(self, user_id: str, friend_id: str) -> bool:
        """
        Make two users friends of each other.

        Inserts both directed edges. Linking users that are already friends
        is a no-op.

        Returns:
            True if at least one edge was created

        Raises:
            InvalidFriendshipError: If both ids are the same
            UserNotFoundError: If either user does not exist
        """
        if user_id == friend_id:
            raise InvalidFriendshipError(user_id)

        self.find_one(user_id)
        self.find_one(friend_id)

        edges = [
            FriendEdge(friend_id=friend_id, friend_of_id=user_id),
            FriendEdge(friend_id=user_id, friend_of_id=friend_id),
        ]
        with self._storage_guard("add_friend"):
            try:
                added = self.store.add_edges(edges)
            except ForeignKeyViolation as e:
                # user deleted between the existence check and the insert
                raise UserNotFoundError(e.user_id) from e

        if added:
            logger.info(f"Linked friends: {user_id} <-> {friend_id}")
        return added > 0

    def remove_friend(self, user_id: str, friend_id: str):
        """
        Remove the friendship between two users in both directions.

        Raises:
            FriendshipNotFoundError: If neither directed edge existed
        """
        edges = [
            FriendEdge(friend_id=friend_id, friend_of_id=user_id),
            FriendEdge(friend_id=user_id, friend_of_id=friend_id),
        ]
        with self._storage_guard("remove_friend"):
            removed = self.store.remove_edges(edges)

        if not removed:
            raise FriendshipNotFoundError(user_id, friend_id)

        logger.info(f"Unlinked friends: {user_id} <-> {friend_id}")

    def get_friends_by_degree(self, user_id: str, degree: int) -> List[User]:
        """
        Get friends of an existing user at exactly ``degree`` hops.

        Raises:
            UserNotFoundError: If no user has this id
            InvalidDegreeError: If degree is not 1, 2 or 3
            StorageFailureError: On any storage fault
        """
        self.find_one(user_id)
        return self.resolver.resolve(user_id, degree)
