"""
Sample data for local development.

Builds a chain of bidirectional friendships:

    Alice - Bob - Charlie - David - Eve

Alice:   1st Bob, 2nd Charlie, 3rd David
Bob:     1st Alice/Charlie, 2nd David, 3rd Eve
Charlie: 1st Bob/David, 2nd Alice/Eve, 3rd none
David:   1st Charlie/Eve, 2nd Bob, 3rd Alice
Eve:     1st David, 2nd Charlie, 3rd Bob
"""

import logging
from typing import List, Sequence

from .graph import User
from .services import UserService

logger = logging.getLogger(__name__)

CHAIN_NAMES = ("Alice", "Bob", "Charlie", "David", "Eve")
SEED_EMAIL_DOMAIN = "example.com"


def seed_email(name: str) -> str:
    """Email address used for a seeded user."""
    return f"{name.strip().replace(' ', '.').lower()}@{SEED_EMAIL_DOMAIN}"


def seed_chain(users: UserService, names: Sequence[str] = CHAIN_NAMES) -> List[User]:
    """
    Create one user per name and link each adjacent pair as friends.

    Args:
        users: UserService to write through
        names: Names in chain order

    Returns:
        Created users in chain order

    Raises:
        UniqueConstraintViolationError: If a seeded email already exists
    """
    created = [users.create(name=name, email=seed_email(name)) for name in names]

    for left, right in zip(created, created[1:]):
        users.add_friend(left.id, right.id)

    logger.info(f"Seeded {len(created)} users in a friendship chain")
    return created
