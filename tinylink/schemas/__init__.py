# re-export common schemas for simpler imports
from .LinkCreateRequest import LinkCreateRequest
from .LinkResponse import LinkEnvelope, LinkResponse
from .LinkSnapshot import LinkSnapshot

__all__ = [
    "LinkCreateRequest",
    "LinkEnvelope",
    "LinkResponse",
    "LinkSnapshot",
]
