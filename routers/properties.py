"""
Property API routes.

Status is read-only here: it is set by the lease lifecycle. A property
with leases or expenses cannot be deleted.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Owner, Property
from models.property import PropertyStatus, PropertyType
from routers.errors import http_error
from schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse, PropertyListResponse
from services.deletion_service import delete_property as delete_property_guarded
from services.exceptions import EntityNotFoundError, DeletionBlockedError

router = APIRouter(prefix="/api/properties", tags=["properties"])


def _get_property_or_404(db: Session, property_id: int) -> Property:
     property_obj = db.get(Property, property_id)
     if not property_obj:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Property with ID {property_id} not found"
          )
     return property_obj


def _ensure_owner_exists(db: Session, owner_id: int) -> None:
     if not db.get(Owner, owner_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Owner with ID {owner_id} not found"
          )


@router.post(
     "",
     response_model=PropertyResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new property"
)
def create_property(property_data: PropertyCreate, db: Session = Depends(get_session)):
     """
     Register a property for an owner. New properties start AVAILABLE.
     """
     _ensure_owner_exists(db, property_data.owner_id)

     property_obj = Property(**property_data.model_dump(), status=PropertyStatus.AVAILABLE)
     db.add(property_obj)
     db.commit()
     db.refresh(property_obj)
     return _build_property_response(property_obj)


@router.get(
     "",
     response_model=PropertyListResponse,
     summary="List properties with filters"
)
def list_properties(
     owner_id: Optional[int] = Query(None, description="Filter by owner ID"),
     status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Filter by status"),
     type_filter: Optional[PropertyType] = Query(None, alias="type", description="Filter by type"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Property)
     if owner_id:
          query = query.filter(Property.owner_id == owner_id)
     if status_filter:
          query = query.filter(Property.status == status_filter)
     if type_filter:
          query = query.filter(Property.type == type_filter)

     total = query.count()
     offset = (page - 1) * page_size
     properties = query.order_by(Property.name).offset(offset).limit(page_size).all()

     return PropertyListResponse(
          properties=[_build_property_response(p) for p in properties],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{property_id}",
     response_model=PropertyResponse,
     summary="Get property by ID"
)
def get_property(property_id: int, db: Session = Depends(get_session)):
     return _build_property_response(_get_property_or_404(db, property_id))


@router.put(
     "/{property_id}",
     response_model=PropertyResponse,
     summary="Update property"
)
def update_property(property_id: int, property_data: PropertyUpdate, db: Session = Depends(get_session)):
     property_obj = _get_property_or_404(db, property_id)
     changes = property_data.model_dump(exclude_unset=True)

     if changes.get("owner_id") is not None:
          _ensure_owner_exists(db, changes["owner_id"])

     for field, value in changes.items():
          if value is not None:
               setattr(property_obj, field, value)

     db.commit()
     db.refresh(property_obj)
     return _build_property_response(property_obj)


@router.delete(
     "/{property_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete property"
)
def delete_property(property_id: int, db: Session = Depends(get_session)):
     """
     Delete a property. Refused with 409 while leases or expenses reference it.
     """
     try:
          delete_property_guarded(db, property_id)
     except (EntityNotFoundError, DeletionBlockedError) as e:
          raise http_error(e)
     db.commit()
     return None


def _build_property_response(property_obj: Property) -> PropertyResponse:
     response = PropertyResponse.model_validate(property_obj)
     response.owner_name = property_obj.owner.name if property_obj.owner else None
     return response
