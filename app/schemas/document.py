import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class DocumentResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    category: str
    original_name: str | None
    file_size: int | None
    mime_type: str | None
    uploaded_by: uuid.UUID
    uploaded_by_name: str | None = None
    download_count: int
    is_public: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
