from typing import List, Optional


class TinyLinkError(Exception):
    """Base class for every error the link pipeline raises."""


class LinkValidationError(TinyLinkError):
    """Raised when caller input is blank or malformed. Nothing is consumed."""

    def __init__(self, details: List[str], resource: str = "link"):
        self.details = list(details)
        self.resource = resource
        super().__init__("; ".join(self.details))


class MalformedShortCodeError(LinkValidationError):
    """Raised when a short code has the wrong length or foreign symbols."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__([f"Short code '{short_code}' is malformed"])


class CollisionError(TinyLinkError):
    """A short code was already taken when persisting a link."""


class ShortCodeConflictError(CollisionError):
    def __init__(self, short_code: str, reason: Optional[str] = None):
        self.short_code = short_code
        message = f"Short code '{short_code}' already exists"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FatalAllocationError(TinyLinkError):
    """Raised when no unique short code could be allocated."""


class CodeSpaceExhaustedError(FatalAllocationError):
    """The counter has grown past the values that encode to six symbols."""

    def __init__(self, counter: int, limit: int):
        self.counter = counter
        self.limit = limit
        super().__init__(
            f"Counter {counter} exceeds the six character code space (max {limit})"
        )


class LinkNotFoundError(TinyLinkError):
    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Couldn't find Link with short_code '{short_code}'")


class DependencyError(TinyLinkError):
    """The cache tier or the durable store failed. Never means 'not found'."""


class CacheUnavailableError(DependencyError):
    pass


class StoreUnavailableError(DependencyError):
    pass


class CounterNotInitializedError(DependencyError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Counter '{key}' has not been initialized")
