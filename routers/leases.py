"""
Lease API routes.

Creating, ending and deleting a lease also updates the property's
occupancy; those routes go through LeaseService.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Lease
from models.lease import LeaseStatus
from routers.errors import http_error
from schemas.lease import LeaseCreate, LeaseUpdate, LeaseEndRequest, LeaseResponse, LeaseListResponse
from services.exceptions import BusinessRuleError, DeletionBlockedError, EntityNotFoundError
from services.lease_service import LeaseService

router = APIRouter(prefix="/api/leases", tags=["leases"])


def _get_lease_or_404(db: Session, lease_id: int) -> Lease:
     lease = db.get(Lease, lease_id)
     if not lease:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Lease with ID {lease_id} not found"
          )
     return lease


@router.post(
     "",
     response_model=LeaseResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new lease"
)
def create_lease(lease_data: LeaseCreate, db: Session = Depends(get_session)):
     """
     Create an active lease. The property is marked occupied in the same
     transaction; a property that is already let returns 409.
     """
     try:
          lease = LeaseService.create_lease(
               db,
               tenant_id=lease_data.tenant_id,
               property_id=lease_data.property_id,
               start_date=lease_data.start_date,
               monthly_rent=lease_data.monthly_rent,
               deposit=lease_data.deposit,
               advance_months=lease_data.advance_months,
               end_date=lease_data.end_date,
          )
     except (EntityNotFoundError, BusinessRuleError) as e:
          raise http_error(e)

     db.refresh(lease)
     return _build_lease_response(lease)


@router.get(
     "",
     response_model=LeaseListResponse,
     summary="List leases with filters"
)
def list_leases(
     status_filter: Optional[LeaseStatus] = Query(None, alias="status", description="Filter by status"),
     tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
     property_id: Optional[int] = Query(None, description="Filter by property ID"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Lease)
     if status_filter:
          query = query.filter(Lease.status == status_filter)
     if tenant_id:
          query = query.filter(Lease.tenant_id == tenant_id)
     if property_id:
          query = query.filter(Lease.property_id == property_id)

     total = query.count()
     offset = (page - 1) * page_size
     leases = query.order_by(Lease.start_date.desc(), Lease.id.desc()).offset(offset).limit(page_size).all()

     return LeaseListResponse(
          leases=[_build_lease_response(lease) for lease in leases],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{lease_id}",
     response_model=LeaseResponse,
     summary="Get lease by ID"
)
def get_lease(lease_id: int, db: Session = Depends(get_session)):
     return _build_lease_response(_get_lease_or_404(db, lease_id))


@router.put(
     "/{lease_id}",
     response_model=LeaseResponse,
     summary="Update lease terms"
)
def update_lease(lease_id: int, lease_data: LeaseUpdate, db: Session = Depends(get_session)):
     lease = _get_lease_or_404(db, lease_id)
     changes = {k: v for k, v in lease_data.model_dump(exclude_unset=True).items() if v is not None}

     start_date = changes.get("start_date", lease.start_date)
     end_date = changes.get("end_date", lease.end_date)
     if end_date is not None and end_date < start_date:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="Lease end date cannot be before its start date"
          )

     for field, value in changes.items():
          setattr(lease, field, value)

     db.commit()
     db.refresh(lease)
     return _build_lease_response(lease)


@router.post(
     "/{lease_id}/end",
     response_model=LeaseResponse,
     summary="End a lease"
)
def end_lease(lease_id: int, body: Optional[LeaseEndRequest] = None, db: Session = Depends(get_session)):
     """
     End an active lease and mark its property available again.
     """
     end_date = body.end_date if body else None
     try:
          lease = LeaseService.end_lease(db, lease_id, end_date=end_date)
     except (EntityNotFoundError, BusinessRuleError) as e:
          raise http_error(e)

     return _build_lease_response(lease)


@router.delete(
     "/{lease_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete lease"
)
def delete_lease(lease_id: int, db: Session = Depends(get_session)):
     """
     Delete a lease with no recorded payments. An active lease frees its property.
     """
     try:
          LeaseService.delete_lease(db, lease_id)
     except (EntityNotFoundError, DeletionBlockedError) as e:
          raise http_error(e)
     return None


def _build_lease_response(lease: Lease) -> LeaseResponse:
     response = LeaseResponse.model_validate(lease)
     response.tenant_name = lease.tenant.name if lease.tenant else None
     response.property_name = lease.property.name if lease.property else None
     return response
