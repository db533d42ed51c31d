"""ORM 모델 모음. import 시 Base.metadata에 모든 테이블이 등록된다."""

from app.db.base import Base
from app.models.user import User, Role
from app.models.complaint import Complaint, ComplaintStatus, Priority
from app.models.announcement import Announcement, AnnouncementCategory, AnnouncementStatus
from app.models.event import Event
from app.models.document import Document
from app.models.gallery import GalleryItem
from app.models.contact import Contact

__all__ = [
    "Base",
    "User",
    "Role",
    "Complaint",
    "ComplaintStatus",
    "Priority",
    "Announcement",
    "AnnouncementCategory",
    "AnnouncementStatus",
    "Event",
    "Document",
    "GalleryItem",
    "Contact",
]
