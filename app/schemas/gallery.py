import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class GalleryItemResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    category: str
    tags: list[str]
    file_path: str
    file_size: int | None
    mime_type: str | None
    uploaded_by: uuid.UUID
    uploaded_by_name: str | None = None
    view_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
