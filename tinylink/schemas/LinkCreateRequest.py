from pydantic import BaseModel
from typing import Optional


# Request DTOs
class LinkCreateRequest(BaseModel):
    # Validated by the shortener, so a missing value reports "can't be blank"
    # instead of a generic 422 from FastAPI
    original_url: Optional[str] = None
