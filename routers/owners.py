"""
Owner API routes.

Provides CRUD operations for property owners. An owner who still owns
properties cannot be deleted.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Owner, Property
from routers.errors import http_error
from routers.properties import _build_property_response
from schemas.owner import OwnerCreate, OwnerUpdate, OwnerResponse, OwnerListResponse
from schemas.property import PropertyListResponse
from services.deletion_service import delete_owner as delete_owner_guarded
from services.exceptions import EntityNotFoundError, DeletionBlockedError

router = APIRouter(prefix="/api/owners", tags=["owners"])


def _get_owner_or_404(db: Session, owner_id: int) -> Owner:
     owner = db.get(Owner, owner_id)
     if not owner:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Owner with ID {owner_id} not found"
          )
     return owner


@router.post(
     "",
     response_model=OwnerResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new owner"
)
def create_owner(owner_data: OwnerCreate, db: Session = Depends(get_session)):
     owner = Owner(**owner_data.model_dump())
     db.add(owner)
     db.commit()
     db.refresh(owner)
     return _build_owner_response(owner, db)


@router.get(
     "",
     response_model=OwnerListResponse,
     summary="List owners"
)
def list_owners(
     search: Optional[str] = Query(None, description="Filter by name (case-insensitive substring)"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Owner)
     if search:
          query = query.filter(Owner.name.ilike(f"%{search}%"))

     total = query.count()
     offset = (page - 1) * page_size
     owners = query.order_by(Owner.name).offset(offset).limit(page_size).all()

     return OwnerListResponse(
          owners=[_build_owner_response(owner, db) for owner in owners],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{owner_id}",
     response_model=OwnerResponse,
     summary="Get owner by ID"
)
def get_owner(owner_id: int, db: Session = Depends(get_session)):
     return _build_owner_response(_get_owner_or_404(db, owner_id), db)


@router.get(
     "/{owner_id}/properties",
     response_model=PropertyListResponse,
     summary="List an owner's properties"
)
def get_owner_properties(owner_id: int, db: Session = Depends(get_session)):
     owner = _get_owner_or_404(db, owner_id)
     properties = (
          db.query(Property)
          .filter(Property.owner_id == owner.id)
          .order_by(Property.name)
          .all()
     )
     return PropertyListResponse(
          properties=[_build_property_response(p) for p in properties],
          total=len(properties),
          page=1,
          page_size=max(len(properties), 1)
     )


@router.put(
     "/{owner_id}",
     response_model=OwnerResponse,
     summary="Update owner"
)
def update_owner(owner_id: int, owner_data: OwnerUpdate, db: Session = Depends(get_session)):
     owner = _get_owner_or_404(db, owner_id)
     for field, value in owner_data.model_dump(exclude_unset=True).items():
          setattr(owner, field, value)
     db.commit()
     db.refresh(owner)
     return _build_owner_response(owner, db)


@router.delete(
     "/{owner_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete owner"
)
def delete_owner(owner_id: int, db: Session = Depends(get_session)):
     """
     Delete an owner. Refused with 409 while the owner still owns properties.
     """
     try:
          delete_owner_guarded(db, owner_id)
     except (EntityNotFoundError, DeletionBlockedError) as e:
          raise http_error(e)
     db.commit()
     return None


def _build_owner_response(owner: Owner, db: Session) -> OwnerResponse:
     property_count = db.query(Property).filter(Property.owner_id == owner.id).count()
     response = OwnerResponse.model_validate(owner)
     response.property_count = property_count
     return response
