from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from database.repositories import (
    InvitationRepositoryDB,
    NotificationRepositoryDB,
    RefreshTokenRepositoryDB,
    TTRRepositoryDB,
    UserRepositoryDB,
)
from database.exceptions import (
    CapacityError,
    DatabaseError,
    DuplicateError,
    NotFoundError,
    StaleStateError,
)

__all__ = [
    "DatabasePool",
    "DatabaseManager",
    "UserRepositoryDB",
    "RefreshTokenRepositoryDB",
    "TTRRepositoryDB",
    "InvitationRepositoryDB",
    "NotificationRepositoryDB",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "CapacityError",
    "StaleStateError",
]
