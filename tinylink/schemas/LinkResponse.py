from pydantic import BaseModel
from datetime import datetime

from tinylink.core.config import settings


# Response DTOs
class LinkResponse(BaseModel):
    id: int
    original_url: str
    short_code: str
    shortened_url: str
    created_at: datetime

    @classmethod
    def from_link(cls, link, base_url: str = None) -> "LinkResponse":
        base = (base_url or settings.BASE_URL).rstrip("/")
        return cls(
            id=link.id,
            original_url=link.original_url,
            short_code=link.short_code,
            shortened_url=f"{base}/{link.short_code}",
            created_at=link.created_at,
        )


class LinkEnvelope(BaseModel):
    data: LinkResponse
