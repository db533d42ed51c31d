"""
gallery.py

마을 갤러리(사진) API 모음.

- 공개 갤러리 목록 (category / search 필터, 기본 12개씩)
- 사진 단건 조회 (조회수 증가)
- 사진 업로드 (admin / super_admin, 필드명: gallery, 한 번에 1~10장)
  -> 파일 1개당 row 1개
- 사진 삭제

"""

import uuid
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.models.gallery import GalleryItem
from app.models.user import User
from app.schemas.gallery import GalleryItemResponse
from app.services.query import apply_filters, clamp_page, contains_any, equals, paginate
from app.services.storage import delete_file, delete_files, save_uploads

router = APIRouter(prefix="/gallery", tags=["gallery"])

GALLERY_PAGE_SIZE = 12
MAX_GALLERY_FILES = 10


def parse_tags(raw: str | None) -> list[str]:
    """"a, b,,c" -> ["a", "b", "c"]"""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


@router.get("")
def list_gallery(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    category: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    page, limit = clamp_page(page, limit, default_limit=GALLERY_PAGE_SIZE)
    stmt = apply_filters(
        select(GalleryItem),
        GalleryItem.is_public.is_(True),
        equals(GalleryItem.category, category),
        contains_any([GalleryItem.title, GalleryItem.description], search),
    ).order_by(desc(GalleryItem.created_at))

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "gallery": [GalleryItemResponse.model_validate(g) for g in rows],
        "pagination": pagination,
    }


@router.get("/{item_id}")
def get_gallery_item(item_id: uuid.UUID, db: Session = Depends(get_db)):
    result = db.execute(
        update(GalleryItem)
        .where(GalleryItem.id == item_id, GalleryItem.is_public.is_(True))
        .values(view_count=GalleryItem.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise HTTPException(status_code=404, detail="Gallery item not found")
    db.commit()

    item = db.get(GalleryItem, item_id)
    return {"item": GalleryItemResponse.model_validate(item)}


"""
사진 업로드 API

- tags 는 쉼표로 구분한 문자열 ("축제, 2024")
- 파일을 먼저 저장하고, DB 저장이 실패하면 저장한 파일을 모두 지움

"""
@router.post("", status_code=status.HTTP_201_CREATED)
def upload_gallery(
    title: str = Form(..., min_length=3, max_length=255),
    category: str = Form(..., min_length=1, max_length=100),
    description: str | None = Form(default=None),
    tags: str | None = Form(default=None),
    gallery: list[UploadFile] | None = File(default=None),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    files = [f for f in (gallery or []) if f.filename]
    if not files:
        raise HTTPException(status_code=400, detail="At least one file is required")
    if len(files) > MAX_GALLERY_FILES:
        raise HTTPException(status_code=400, detail=f"At most {MAX_GALLERY_FILES} files allowed")

    try:
        stored = save_uploads(files, "gallery")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    tag_list = parse_tags(tags)
    items = [
        GalleryItem(
            title=title,
            description=description,
            category=category,
            tags=tag_list,
            file_path=s.path,
            file_size=s.size,
            mime_type=s.mime_type,
            uploaded_by=current_admin.id,
        )
        for s in stored
    ]
    try:
        db.add_all(items)
        db.commit()
        for item in items:
            db.refresh(item)
    except Exception as e:
        db.rollback()
        delete_files(s.path for s in stored)
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Gallery items uploaded successfully",
        "items": [GalleryItemResponse.model_validate(i) for i in items],
    }


@router.delete("/{item_id}")
def delete_gallery_item(
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    item = db.get(GalleryItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Gallery item not found")

    file_path = item.file_path
    try:
        db.delete(item)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    delete_file(file_path)
    return {"message": "Gallery item deleted successfully"}
