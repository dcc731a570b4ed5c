class DatabaseError(Exception):
    """Base for all database errors."""


class NotFoundError(DatabaseError):
    """Entity not found."""


class DuplicateError(DatabaseError):
    """Unique constraint violation."""


class CapacityError(DatabaseError):
    """Roster is already at max_players."""


class StaleStateError(DatabaseError):
    """Row no longer in the state the write expected (e.g. invitation not PENDING)."""
