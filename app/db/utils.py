import logging
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as SATimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.http import StoreTimeoutError, ValidationError

logger = logging.getLogger(__name__)

# Postgres lock_not_available and query_canceled (lock_timeout / statement_timeout)
_TIMEOUT_SQLSTATES = {"55P03", "57014"}
_TIMEOUT_MESSAGES = ("database is locked", "lock timeout", "statement timeout")

T = TypeVar("T")


def apply_dict_updates(entity: T, update_data: dict[str, Any], excluded_attrs: set[str] | None) -> T:
    """
    Dynamically applies key-value pairs from a dictionary to an ORM entity.

    Only the keys present in `update_data` are touched, so callers pass the fields that
    were explicitly supplied (e.g. `model_dump(exclude_unset=True)`). A key mapped to
    None clears that attribute.

    Args:
        entity: The SQLAlchemy ORM object loaded into the session.
        update_data: Dictionary of fields and values to update.
        excluded_attrs: Attribute names to explicitly ignore/skip updating.
    """
    excluded_attrs = excluded_attrs if excluded_attrs else set()
    for key, value in update_data.items():

        if key in excluded_attrs:
            continue

        if hasattr(entity, key):
            setattr(entity, key, value)

    return entity


def _is_store_timeout(exc: DBAPIError) -> bool:
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code in _TIMEOUT_SQLSTATES:
        return True
    message = str(exc.orig).lower()
    return any(marker in message for marker in _TIMEOUT_MESSAGES)


async def commit_or_raise(session: AsyncSession) -> None:
    """
    Commits the unit of work. On failure the session is rolled back and store errors
    are mapped onto the application error hierarchy:

    - a unique violation on users.username becomes ValidationError
    - pool checkout timeouts and driver lock/statement timeouts become StoreTimeoutError

    Anything else is re-raised unchanged after the rollback.
    """
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if "username" in str(exc.orig).lower():
            raise ValidationError("Username is already taken.") from exc
        raise
    except DBAPIError as exc:
        await session.rollback()
        if _is_store_timeout(exc):
            logger.error("Database commit timed out: %s", exc.orig)
            raise StoreTimeoutError("The database did not respond in time.") from exc
        raise
    except (SATimeoutError, TimeoutError) as exc:
        await session.rollback()
        logger.error("Database commit timed out: %s", exc)
        raise StoreTimeoutError("The database did not respond in time.") from exc
    except Exception:
        await session.rollback()
        raise
