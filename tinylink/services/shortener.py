import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from tinylink.core.errors import (
    CodeSpaceExhaustedError,
    FatalAllocationError,
    LinkValidationError,
    ShortCodeConflictError,
)
from tinylink.db import repository
from tinylink.db.Models.models import Link
from tinylink.services.counter import CounterAllocator
from tinylink.utils import encoding
from tinylink.utils.validation import original_url_errors

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class AttemptStatus(str, enum.Enum):
    CREATED = "created"
    COLLISION = "collision"
    EXHAUSTED = "exhausted"


@dataclass
class AllocationAttempt:
    status: AttemptStatus
    attempt: int
    counter: Optional[int] = None
    short_code: Optional[str] = None
    link: Optional[Link] = None


class ShortCodeGenerator:
    """Creates links whose short codes come from the shared counter.

    Each attempt allocates a counter value, encodes it and inserts the link.
    A unique violation on short_code is logged and retried with a fresh
    counter value, up to ``max_attempts`` times.
    """

    def __init__(self, counter: CounterAllocator, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.counter = counter
        self.max_attempts = max_attempts

    def create_shortened_for(self, db: Session, original_url: Optional[str]) -> Link:
        errors = original_url_errors(original_url)
        if errors:
            raise LinkValidationError(errors)

        result = self.allocate(db, original_url)
        if result.status is AttemptStatus.CREATED:
            logger.info("Shortened %s... to %s", original_url[:50], result.short_code)
            return result.link

        logger.error(
            "Giving up on %s... after %d colliding attempts", original_url[:50], result.attempt
        )
        raise FatalAllocationError(
            f"Failed to generate unique short code after {result.attempt} attempts"
        )

    def allocate(self, db: Session, original_url: str) -> AllocationAttempt:
        for attempt in range(1, self.max_attempts + 1):
            outcome = self._attempt(db, original_url, attempt)
            if outcome.status is AttemptStatus.CREATED:
                return outcome
            logger.warning(
                "Failed to create unique short code %s (counter %d), attempt %d/%d",
                outcome.short_code, outcome.counter, attempt, self.max_attempts
            )
        return AllocationAttempt(status=AttemptStatus.EXHAUSTED, attempt=self.max_attempts)

    def next_short_code(self):
        counter = self.counter.increment_and_get()
        if counter > encoding.MAX_SIX_CHAR_VALUE:
            logger.critical(
                "Counter %d is past %d, six character codes are used up",
                counter, encoding.MAX_SIX_CHAR_VALUE
            )
            raise CodeSpaceExhaustedError(counter, encoding.MAX_SIX_CHAR_VALUE)
        if counter < encoding.MIN_SIX_CHAR_VALUE:
            raise FatalAllocationError(
                f"Counter {counter} encodes to fewer than six characters, "
                f"check INITIAL_URL_COUNTER (minimum {encoding.MIN_SIX_CHAR_VALUE})"
            )
        return counter, encoding.encode(counter)

    def _attempt(self, db: Session, original_url: str, attempt: int) -> AllocationAttempt:
        counter, short_code = self.next_short_code()
        try:
            link = repository.insert_link(db, original_url, short_code)
        except ShortCodeConflictError:
            return AllocationAttempt(
                status=AttemptStatus.COLLISION, attempt=attempt, counter=counter, short_code=short_code
            )
        return AllocationAttempt(
            status=AttemptStatus.CREATED, attempt=attempt, counter=counter, short_code=short_code, link=link
        )
