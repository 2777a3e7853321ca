from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violated_constraint(exc: IntegrityError) -> str | None:
    """Returns the constraint name Postgres reported for the failed statement.

    asyncpg errors carry ``constraint_name``; SQLAlchemy wraps them, so the
    driver error sits on ``orig`` or on its ``__cause__``.
    """
    for candidate in (exc.orig, getattr(exc.orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return str(name)
    return None
