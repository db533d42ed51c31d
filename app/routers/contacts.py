"""
contacts.py

마을 행정 담당자 연락처 API.

- 공개 연락처 목록 (department / search 필터, 부서 -> 직위 순 정렬)
- 연락처 등록 / 수정 / 삭제 (admin / super_admin)

"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.models.contact import Contact
from app.models.user import User
from app.schemas.contact import ContactRequest, ContactResponse
from app.services.query import apply_filters, clamp_page, contains_any, equals, paginate

router = APIRouter(prefix="/contacts", tags=["contacts"])

CONTACTS_PAGE_SIZE = 20


@router.get("")
def list_contacts(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    department: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    page, limit = clamp_page(page, limit, default_limit=CONTACTS_PAGE_SIZE)
    stmt = apply_filters(
        select(Contact),
        Contact.is_public.is_(True),
        equals(Contact.department, department),
        contains_any([Contact.name, Contact.position], search),
    ).order_by(Contact.department, Contact.position)

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "contacts": [ContactResponse.model_validate(c) for c in rows],
        "pagination": pagination,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_contact(
    data: ContactRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    contact = Contact(**data.model_dump(), created_by=current_admin.id)
    try:
        db.add(contact)
        db.commit()
        db.refresh(contact)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Contact created successfully", "contact": ContactResponse.model_validate(contact)}


@router.put("/{contact_id}")
def update_contact(
    contact_id: uuid.UUID,
    data: ContactRequest,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    contact = db.get(Contact, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")

    for field, value in data.model_dump().items():
        setattr(contact, field, value)

    try:
        db.commit()
        db.refresh(contact)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Contact updated successfully", "contact": ContactResponse.model_validate(contact)}


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    contact = db.get(Contact, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")

    try:
        db.delete(contact)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Contact deleted successfully"}
