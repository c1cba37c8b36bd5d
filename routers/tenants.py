"""
Tenant API routes.

A tenant with leases (active or ended) cannot be deleted.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_session
from models import Tenant
from routers.errors import http_error
from schemas.tenant import TenantCreate, TenantUpdate, TenantResponse, TenantListResponse
from services.deletion_service import delete_tenant as delete_tenant_guarded
from services.exceptions import EntityNotFoundError, DeletionBlockedError

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


def _get_tenant_or_404(db: Session, tenant_id: int) -> Tenant:
     tenant = db.get(Tenant, tenant_id)
     if not tenant:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenant with ID {tenant_id} not found"
          )
     return tenant


@router.post(
     "",
     response_model=TenantResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new tenant"
)
def create_tenant(tenant_data: TenantCreate, db: Session = Depends(get_session)):
     tenant = Tenant(**tenant_data.model_dump())
     db.add(tenant)
     db.commit()
     db.refresh(tenant)
     return tenant


@router.get(
     "",
     response_model=TenantListResponse,
     summary="List tenants"
)
def list_tenants(
     search: Optional[str] = Query(None, description="Filter by name or phone"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Tenant)
     if search:
          pattern = f"%{search}%"
          query = query.filter(or_(Tenant.name.ilike(pattern), Tenant.phone.ilike(pattern)))

     total = query.count()
     offset = (page - 1) * page_size
     tenants = query.order_by(Tenant.name).offset(offset).limit(page_size).all()

     return TenantListResponse(
          tenants=[TenantResponse.model_validate(t) for t in tenants],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{tenant_id}",
     response_model=TenantResponse,
     summary="Get tenant by ID"
)
def get_tenant(tenant_id: int, db: Session = Depends(get_session)):
     return _get_tenant_or_404(db, tenant_id)


@router.put(
     "/{tenant_id}",
     response_model=TenantResponse,
     summary="Update tenant"
)
def update_tenant(tenant_id: int, tenant_data: TenantUpdate, db: Session = Depends(get_session)):
     tenant = _get_tenant_or_404(db, tenant_id)
     for field, value in tenant_data.model_dump(exclude_unset=True).items():
          setattr(tenant, field, value)
     db.commit()
     db.refresh(tenant)
     return tenant


@router.delete(
     "/{tenant_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete tenant"
)
def delete_tenant(tenant_id: int, db: Session = Depends(get_session)):
     """
     Delete a tenant. Refused with 409 while leases reference the tenant;
     past notifications are kept without a tenant reference.
     """
     try:
          delete_tenant_guarded(db, tenant_id)
     except (EntityNotFoundError, DeletionBlockedError) as e:
          raise http_error(e)
     db.commit()
     return None
