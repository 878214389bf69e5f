from sqlalchemy.orm import Session

from tinylink.core.config import Settings, settings as default_settings
from tinylink.db.Models.models import Link
from tinylink.schemas.LinkSnapshot import LinkSnapshot
from tinylink.services.counter import CounterAllocator
from tinylink.services.resolution import ResolutionCache
from tinylink.services.shortener import ShortCodeGenerator


class LinkService:
    """The two operations callers get: create a short link, resolve one."""

    def __init__(self, cache, settings: Settings = default_settings):
        self.counter = CounterAllocator(
            cache,
            key=settings.URL_COUNTER_KEY,
            initial_value=settings.INITIAL_URL_COUNTER,
            auto_initialize=settings.AUTO_INITIALIZE_COUNTER,
        )
        self.generator = ShortCodeGenerator(self.counter, max_attempts=settings.MAX_ALLOCATION_ATTEMPTS)
        self.resolver = ResolutionCache(cache, ttl=settings.LINK_CACHE_TTL, prefix=settings.LINK_CACHE_PREFIX)

    def create_shortened_for(self, db: Session, original_url: str) -> Link:
        return self.generator.create_shortened_for(db, original_url)

    def resolve(self, db: Session, short_code: str) -> LinkSnapshot:
        return self.resolver.resolve(db, short_code)
