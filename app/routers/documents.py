"""
documents.py

마을 공문서(Document) API 모음.

주요 기능:
- 공개 문서 목록 조회 (category / search 필터)
- 문서 업로드 (admin / super_admin, multipart 필드명: documents)
- 문서 다운로드 (다운로드 횟수 증가)
- 문서 삭제 (DB row + 저장된 파일)

설계 원칙:
- 비공개(is_public=False) 문서는 목록/다운로드 모두 404
- 다운로드 횟수는 UPDATE ... SET download_count = download_count + 1 로 증가

"""

import os
import uuid
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.models.document import Document
from app.models.user import User
from app.schemas.document import DocumentResponse
from app.services.query import apply_filters, clamp_page, contains_any, equals, paginate
from app.services.storage import delete_file, save_upload

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("")
def list_documents(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    category: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    page, limit = clamp_page(page, limit)
    stmt = apply_filters(
        select(Document),
        Document.is_public.is_(True),
        equals(Document.category, category),
        contains_any([Document.title, Document.description], search),
    ).order_by(desc(Document.created_at))

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "documents": [DocumentResponse.model_validate(d) for d in rows],
        "pagination": pagination,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_document(
    title: str = Form(..., min_length=3, max_length=255),
    category: str = Form(..., min_length=1, max_length=100),
    description: str | None = Form(default=None),
    is_public: bool = Form(default=True),
    documents: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if documents is None or not documents.filename:
        raise HTTPException(status_code=400, detail="Document file is required")

    try:
        stored = save_upload(documents, "documents")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    document = Document(
        title=title,
        description=description,
        category=category,
        file_path=stored.path,
        original_name=stored.original_name,
        file_size=stored.size,
        mime_type=stored.mime_type,
        uploaded_by=current_admin.id,
        is_public=is_public,
    )
    try:
        db.add(document)
        db.commit()
        db.refresh(document)
    except Exception as e:
        db.rollback()
        delete_file(stored.path)
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Document uploaded successfully", "document": DocumentResponse.model_validate(document)}


@router.get("/{document_id}/download")
def download_document(document_id: uuid.UUID, db: Session = Depends(get_db)):
    document = db.scalar(
        select(Document).where(Document.id == document_id, Document.is_public.is_(True))
    )
    if not document or not os.path.exists(document.file_path):
        raise HTTPException(status_code=404, detail="Document not found")

    db.execute(
        update(Document)
        .where(Document.id == document_id)
        .values(download_count=Document.download_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    ext = os.path.splitext(document.file_path)[1]
    filename = document.original_name or f"{document.title}{ext}"
    return FileResponse(document.file_path, filename=filename, media_type=document.mime_type)


@router.delete("/{document_id}")
def delete_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    document = db.get(Document, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")

    file_path = document.file_path
    try:
        db.delete(document)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    delete_file(file_path)
    return {"message": "Document deleted successfully"}
