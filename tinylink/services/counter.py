import logging
from typing import Optional

from tinylink.core.errors import CounterNotInitializedError

logger = logging.getLogger(__name__)


class CounterAllocator:
    """Hands out unique sequence numbers from a named counter in the cache tier.

    Uniqueness across processes comes entirely from the cache's atomic
    increment; nothing is locked in-process.
    """

    def __init__(self, cache, key: str, initial_value: int, auto_initialize: bool = True):
        self.cache = cache
        self.key = key
        self.initial_value = initial_value
        self.auto_initialize = auto_initialize

    def initialize(self) -> bool:
        """Set the counter to its starting value if it does not exist yet.

        Returns True only for the call whose write took effect.
        """
        written = self.cache.write(self.key, self.initial_value, raw=True, unless_exist=True)
        if written:
            logger.info("Initialized counter %s at %d", self.key, self.initial_value)
        return written

    def increment_and_get(self) -> int:
        if not self.cache.exists(self.key):
            if not self.auto_initialize:
                raise CounterNotInitializedError(self.key)
            logger.warning("Counter %s missing, initializing on demand", self.key)
            self.initialize()
        return self.cache.increment(self.key)

    def current(self) -> Optional[int]:
        value = self.cache.read(self.key, raw=True)
        return int(value) if value is not None else None
