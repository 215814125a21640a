import uuid

from pydantic import BaseModel, Field


class VideoCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    post_id: uuid.UUID | None = None
