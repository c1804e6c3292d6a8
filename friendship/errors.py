"""
Domain errors.

Every error carries an HTTP status code, a human readable message, an
optional structured ``data`` payload and a machine readable ``type`` tag
derived from the class name (``UserNotFoundError`` -> ``USER_NOT_FOUND_ERROR``).
"""

import re
from typing import Any, Dict, Optional


def exception_name_to_type(name: str) -> str:
    """Convert a CamelCase exception name into an UPPER_SNAKE type tag."""
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", name)
    return snake.upper()


class FriendshipError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        self.message = message or self.message
        self.data = data
        super().__init__(self.message)

    @property
    def type(self) -> str:
        return exception_name_to_type(type(self).__name__)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "statusCode": self.status_code,
            "type": self.type,
            "message": self.message,
        }
        if self.data is not None:
            body["data"] = self.data
        return body


class UserNotFoundError(FriendshipError):
    """Requested user id does not exist."""

    status_code = 404
    message = "User not found"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(data={"userId": user_id})


class FriendshipNotFoundError(FriendshipError):
    """No edge exists between the two users."""

    status_code = 404
    message = "Friendship not found"

    def __init__(self, user_id: str, friend_id: str):
        super().__init__(data={"userId": user_id, "friendId": friend_id})


class UniqueConstraintViolationError(FriendshipError):
    """Email already belongs to another user."""

    status_code = 409
    message = "There is a unique constraint violation, a user with this email already exists"

    def __init__(self, email: str):
        self.email = email
        super().__init__(data={"email": email})


class InvalidDegreeError(FriendshipError):
    """Degree outside of {1, 2, 3} reached the resolver."""

    status_code = 400
    message = "Invalid degree"

    def __init__(self, degree: Any):
        self.degree = degree
        super().__init__(data={"degree": degree, "allowed": [1, 2, 3]})


class InvalidFriendshipError(FriendshipError):
    """A user cannot befriend themselves."""

    status_code = 400
    message = "A user cannot be a friend of themselves"

    def __init__(self, user_id: str):
        super().__init__(data={"userId": user_id})


class StorageFailureError(FriendshipError):
    """Opaque infrastructure fault; the original exception is kept in ``cause``."""

    status_code = 500
    message = "There is an error with the storage operation"

    def __init__(self, cause: BaseException, operation: Optional[str] = None):
        self.cause = cause
        self.operation = operation
        super().__init__(data={"operation": operation} if operation else None)
