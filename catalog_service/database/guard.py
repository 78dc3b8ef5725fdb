"""Translation of storage driver faults into domain errors."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog_service.exceptions import ConflictException, DatabaseException

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(
    operation: str,
    *,
    entity_name: str | None = None,
    key: Any = None,
) -> Iterator[None]:
    """Translate storage faults raised inside the block.

    With ``entity_name`` set, an ``IntegrityError`` is a unique-name
    rejection and becomes a conflict. Everything else from the storage
    driver (including timeouts) becomes a :class:`DatabaseException`.
    """
    try:
        yield
    except IntegrityError as exc:
        if entity_name is not None:
            logger.warning("Storage rejected duplicate %s name during %s: %s", entity_name, operation, key)
            raise ConflictException.for_entity(entity_name, key) from exc
        logger.error("Integrity error during %s", operation, exc_info=exc)
        raise DatabaseException.for_operation(operation, exc) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Storage fault during %s", operation, exc_info=exc)
        raise DatabaseException.for_operation(operation, exc) from exc
