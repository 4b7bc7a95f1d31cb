from sqlalchemy.exc import IntegrityError

POSTGRES_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_VIOLATION = "UNIQUE constraint failed"


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell whether an IntegrityError was raised by a unique index or constraint."""
    orig_error = error.orig
    if getattr(orig_error, "sqlstate", None) == POSTGRES_UNIQUE_VIOLATION:
        return True
    if getattr(orig_error, "pgcode", None) == POSTGRES_UNIQUE_VIOLATION:
        return True
    return SQLITE_UNIQUE_VIOLATION in str(orig_error)
