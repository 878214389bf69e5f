from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from tinylink.core.errors import ShortCodeConflictError, StoreUnavailableError
from tinylink.db.Models.models import Link, utcnow

logger = logging.getLogger(__name__)


def find_by_short_code(db: Session, short_code: str) -> Optional[Link]:
    try:
        return db.query(Link).filter(Link.short_code == short_code).first()
    except SQLAlchemyError as e:
        logger.error("Link lookup failed for short_code=%s: %s", short_code, e)
        raise StoreUnavailableError(f"Link lookup failed: {e}") from e


def _is_short_code_violation(error: IntegrityError) -> bool:
    error_msg = str(error.orig).lower() if getattr(error, "orig", None) is not None else str(error).lower()
    return "short_code" in error_msg or "unique" in error_msg or "duplicate" in error_msg


def insert_link(db: Session, original_url: str, short_code: str) -> Link:
    """Persist a new link, relying on the unique index on short_code.

    Raises ShortCodeConflictError when the code is taken and
    StoreUnavailableError for any other database failure.
    """
    now = utcnow()
    link = Link(original_url=original_url, short_code=short_code, created_at=now, updated_at=now)
    try:
        db.add(link)
        db.commit()
        db.refresh(link)
        return link
    except IntegrityError as e:
        db.rollback()
        if _is_short_code_violation(e):
            logger.warning(
                "IntegrityError creating Link short_code=%s original=%s: %s",
                short_code, original_url[:50], e.orig
            )
            raise ShortCodeConflictError(short_code, str(e.orig)) from e
        raise StoreUnavailableError(f"Failed to create Link: {e.orig}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create Link short_code=%s: %s", short_code, e)
        raise StoreUnavailableError(f"Failed to create Link: {e}") from e
