from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from travel_api.core.errors import Conflict, RepositoryError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, operation: str, *, conflict_message: Optional[str] = None) -> Iterator[None]:
    """Roll back and re-raise storage failures as ``RepositoryError``.

    When ``conflict_message`` is given, unique/foreign-key violations are
    reported as ``Conflict`` instead.
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is not None:
            logger.warning("%s: integrity violation %s", operation, exc.orig)
            raise Conflict(conflict_message, detail=str(exc.orig)) from exc
        logger.exception("%s failed", operation)
        raise RepositoryError(operation, detail=str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed", operation)
        raise RepositoryError(operation, detail=str(exc)) from exc


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def load_json(raw: Optional[str], *, operation: str) -> Optional[Any]:
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RepositoryError(operation, detail=f"Stored value is not valid JSON: {exc}") from exc
