import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from tinylink.core.errors import LinkNotFoundError, MalformedShortCodeError
from tinylink.db import repository
from tinylink.schemas.LinkSnapshot import LinkSnapshot
from tinylink.utils.encoding import is_valid_short_code

logger = logging.getLogger(__name__)

CACHE_PREFIX = "link:"
CACHE_TTL = 12 * 60 * 60


class ResolutionCache:
    """Cache-aside lookup of links by short code.

    Hits never touch the database. Misses that the database cannot answer
    raise LinkNotFoundError and leave the cache untouched, so unknown codes
    always go to the store.
    """

    def __init__(self, cache, ttl: int = CACHE_TTL, prefix: str = CACHE_PREFIX):
        self.cache = cache
        self.ttl = ttl
        self.prefix = prefix

    def cache_key(self, short_code: str) -> str:
        return f"{self.prefix}{short_code}"

    def resolve(self, db: Session, short_code: str) -> LinkSnapshot:
        if not is_valid_short_code(short_code):
            raise MalformedShortCodeError(short_code)

        def load():
            link = repository.find_by_short_code(db, short_code)
            if link is None:
                logger.info("Short code not found: %s", short_code)
                raise LinkNotFoundError(short_code)
            logger.info("Cache MISS/DB HIT for %s", short_code)
            return LinkSnapshot.model_validate(link).model_dump(mode="json")

        key = self.cache_key(short_code)
        cached = self.cache.fetch(key, self.ttl, load)
        try:
            return LinkSnapshot.model_validate(cached)
        except ValidationError:
            # Entry written in another shape; reload it from the store
            logger.warning("Discarding stale cache entry %s", key)
            self.cache.delete(key)
            return LinkSnapshot.model_validate(self.cache.fetch(key, self.ttl, load))
