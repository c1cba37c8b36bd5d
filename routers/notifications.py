"""
Notification API routes.

Rent reminders are created by the overdue-rent check (also run daily by
scripts/check_overdue_rents.py); confirmations are created by hand.
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Notification, Tenant
from models.notification import NotificationStatus, NotificationType
from schemas.notification import (
     NotificationCreate,
     NotificationListResponse,
     NotificationResponse,
     NotificationUpdate,
     OverdueRentCheckResponse,
)
from services.rent_sweep import check_overdue_rents

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _get_notification_or_404(db: Session, notification_id: int) -> Notification:
     notification = db.get(Notification, notification_id)
     if not notification:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Notification with ID {notification_id} not found"
          )
     return notification


@router.post(
     "/check-overdue-rents",
     response_model=OverdueRentCheckResponse,
     response_model_by_alias=True,
     summary="Run the overdue rent check"
)
def run_overdue_rent_check(db: Session = Depends(get_session)):
     """
     Check every active lease for unpaid rent this month and record one
     reminder per late tenant per month. Safe to call repeatedly.
     """
     return check_overdue_rents(db)


@router.post(
     "",
     response_model=NotificationResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a notification"
)
def create_notification(notification_data: NotificationCreate, db: Session = Depends(get_session)):
     if notification_data.tenant_id is not None and not db.get(Tenant, notification_data.tenant_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenant with ID {notification_data.tenant_id} not found"
          )

     notification = Notification(**notification_data.model_dump())
     if notification.status == NotificationStatus.SENT:
          notification.sent_at = datetime.now()
     db.add(notification)
     db.commit()
     db.refresh(notification)
     return _build_notification_response(notification)


@router.get(
     "",
     response_model=NotificationListResponse,
     summary="List notifications with filters"
)
def list_notifications(
     type_filter: Optional[NotificationType] = Query(None, alias="type", description="Filter by type"),
     status_filter: Optional[NotificationStatus] = Query(None, alias="status", description="Filter by status"),
     tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Notification)
     if type_filter:
          query = query.filter(Notification.type == type_filter)
     if status_filter:
          query = query.filter(Notification.status == status_filter)
     if tenant_id:
          query = query.filter(Notification.tenant_id == tenant_id)

     total = query.count()
     offset = (page - 1) * page_size
     notifications = (
          query.order_by(Notification.created_at.desc(), Notification.id.desc())
          .offset(offset)
          .limit(page_size)
          .all()
     )

     return NotificationListResponse(
          notifications=[_build_notification_response(n) for n in notifications],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{notification_id}",
     response_model=NotificationResponse,
     summary="Get notification by ID"
)
def get_notification(notification_id: int, db: Session = Depends(get_session)):
     return _build_notification_response(_get_notification_or_404(db, notification_id))


@router.patch(
     "/{notification_id}/received",
     response_model=NotificationResponse,
     summary="Mark a notification as received"
)
def mark_notification_received(notification_id: int, db: Session = Depends(get_session)):
     notification = _get_notification_or_404(db, notification_id)
     notification.mark_as_received(datetime.now())
     db.commit()
     db.refresh(notification)
     return _build_notification_response(notification)


@router.put(
     "/{notification_id}",
     response_model=NotificationResponse,
     summary="Update notification status"
)
def update_notification(
     notification_id: int,
     notification_data: NotificationUpdate,
     db: Session = Depends(get_session)
):
     notification = _get_notification_or_404(db, notification_id)
     changes = notification_data.model_dump(exclude_unset=True)

     if changes.get("status") == NotificationStatus.RECEIVED:
          notification.mark_as_received(changes.get("received_at") or datetime.now())
     else:
          for field, value in changes.items():
               if value is not None:
                    setattr(notification, field, value)

     db.commit()
     db.refresh(notification)
     return _build_notification_response(notification)


@router.delete(
     "/{notification_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete notification"
)
def delete_notification(notification_id: int, db: Session = Depends(get_session)):
     notification = _get_notification_or_404(db, notification_id)
     db.delete(notification)
     db.commit()
     return None


def _build_notification_response(notification: Notification) -> NotificationResponse:
     response = NotificationResponse.model_validate(notification)
     response.tenant_name = notification.tenant.name if notification.tenant else None
     return response
