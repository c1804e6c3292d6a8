"""
Friend-degree resolution.

Computes the set of users at an exact degree of separation from an origin
user by expanding the friendship graph one hop at a time.
"""

import logging
from typing import Callable, Dict, Iterable, List, Set

from ..errors import FriendshipError, InvalidDegreeError, StorageFailureError
from .schema import User
from .store import GraphStore

logger = logging.getLogger(__name__)

SUPPORTED_DEGREES = (1, 2, 3)


class FriendDegreeResolver:
    """
    Stateless resolver for 1st, 2nd and 3rd degree friends.

    Hops follow edges from ``friend_of_id`` to ``friend_id``. Results never
    contain the origin, contain each user once, and are ordered by id.

    Exclusion rules differ per degree:
    - degree 1: every direct friend
    - degree 2: every two-hop user except the origin; a direct friend that is
      also two hops away is kept
    - degree 3: breadth-first expansion that drops direct friends at every
      step, keeping users whose shortest depth is exactly 3
    """

    def __init__(self, store: GraphStore):
        self.store = store
        self._strategies: Dict[int, Callable[[str], Set[str]]] = {
            1: self._first_degree,
            2: self._second_degree,
            3: self._third_degree,
        }

    def resolve(self, user_id: str, degree: int) -> List[User]:
        """
        Resolve friends of ``user_id`` at exactly ``degree`` hops.

        Args:
            user_id: Origin user id (unknown ids yield an empty list)
            degree: 1, 2 or 3

        Returns:
            Users ordered by id ascending

        Raises:
            InvalidDegreeError: If degree is not 1, 2 or 3
            StorageFailureError: If the store fails during the traversal
        """
        if isinstance(degree, bool) or not isinstance(degree, int) or degree not in self._strategies:
            raise InvalidDegreeError(degree)

        try:
            friend_ids = self._strategies[degree](user_id)
            friends = self.store.get_users(friend_ids)
        except FriendshipError:
            raise
        except Exception as e:
            logger.error(f"Failed to resolve degree {degree} friends of {user_id}: {e}", exc_info=True)
            raise StorageFailureError(e, operation="resolve_friends_by_degree") from e

        logger.debug(f"Resolved {len(friends)} degree {degree} friends of {user_id}")
        return friends

    # === Strategies ===

    def _first_degree(self, origin: str) -> Set[str]:
        return set(self.store.get_friend_ids(origin)) - {origin}

    def _second_degree(self, origin: str) -> Set[str]:
        direct = self.store.get_friend_ids(origin)
        return self._expand(direct, excluded={origin})

    def _third_degree(self, origin: str) -> Set[str]:
        direct = set(self.store.get_friend_ids(origin))
        visited = direct | {origin}

        second = self._expand(direct, excluded=visited)
        visited |= second

        return self._expand(second, excluded=visited)

    # === Helpers ===

    def _expand(self, frontier: Iterable[str], excluded: Set[str]) -> Set[str]:
        """One hop from every frontier node, dropping excluded candidates."""
        reached: Set[str] = set()
        for node_id in frontier:
            for candidate in self.store.get_friend_ids(node_id):
                if candidate not in excluded:
                    reached.add(candidate)
        return reached
