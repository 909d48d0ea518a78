"""Transaction helpers shared by the services.

Every mutation runs inside ``unit_of_work``: the body either commits as a
whole or is rolled back, and driver exceptions surface as ``StorageError``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(
    db: AsyncSession,
    action: str,
    conflict_message: Optional[str] = None,
) -> AsyncIterator[AsyncSession]:
    """Commit the body as one transaction, rolling back on any failure."""
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if conflict_message:
            raise ConflictError(conflict_message) from exc
        logger.error(f"Integrity error while trying to {action}", exc_info=True)
        raise StorageError(f"Failed to {action}") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(f"Storage failure while trying to {action}", exc_info=True)
        raise StorageError(f"Failed to {action}") from exc
    except Exception:
        await db.rollback()
        raise


@asynccontextmanager
async def storage_errors(action: str) -> AsyncIterator[None]:
    """Translate driver exceptions raised by read-only queries."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"Storage failure while trying to {action}", exc_info=True)
        raise StorageError(f"Failed to {action}") from exc
