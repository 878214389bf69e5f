from pydantic import BaseModel, ConfigDict
from datetime import datetime


# Read model for a persisted link; this is what the resolution cache stores
class LinkSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    original_url: str
    short_code: str
    created_at: datetime
