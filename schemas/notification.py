"""
Pydantic schemas for notifications and the overdue-rent check.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.notification import NotificationStatus, NotificationType


class NotificationCreate(BaseModel):
     """Schema for creating a notification by hand (e.g. a payment confirmation)."""
     tenant_id: Optional[int] = Field(None, gt=0)
     type: NotificationType = Field(default=NotificationType.CONFIRMATION)
     message: str = Field(..., min_length=1)
     channel: str = Field(default="app", min_length=1, max_length=30)
     status: NotificationStatus = Field(default=NotificationStatus.SENT)


class NotificationUpdate(BaseModel):
     """Schema for updating a notification's delivery status."""
     status: Optional[NotificationStatus] = None
     received_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
     """Schema for notification response."""
     id: int
     tenant_id: Optional[int] = None
     type: NotificationType
     message: str
     channel: str
     status: NotificationStatus
     period: Optional[str] = None
     sent_at: Optional[datetime] = None
     received_at: Optional[datetime] = None
     created_at: datetime

     # Optional related data
     tenant_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
     """Schema for paginated notification list response."""
     notifications: List[NotificationResponse]
     total: int
     page: int = 1
     page_size: int = 50


class OverdueRentDetail(BaseModel):
     """One reminder created by the overdue-rent check."""
     tenant_name: str = Field(..., alias="tenantName")
     property_name: str = Field(..., alias="propertyName")
     amount_due: float = Field(..., alias="amountDue")
     amount_paid: float = Field(..., alias="amountPaid")
     amount_remaining: float = Field(..., alias="amountRemaining")

     model_config = ConfigDict(populate_by_name=True)


class OverdueRentCheckResponse(BaseModel):
     """Result of POST /api/notifications/check-overdue-rents."""
     success: bool
     message: str
     notifications_created: int = Field(..., alias="notificationsCreated")
     overdue_contracts: int = Field(..., alias="overdueContracts")
     details: List[OverdueRentDetail]
     timestamp: datetime

     model_config = ConfigDict(
          populate_by_name=True,
          json_schema_extra={
               "example": {
                    "success": True,
                    "message": "Checked 12 lease(s)",
                    "notificationsCreated": 1,
                    "overdueContracts": 1,
                    "details": [
                         {
                              "tenantName": "Koffi Yao",
                              "propertyName": "Studio B2",
                              "amountDue": 80000,
                              "amountPaid": 30000,
                              "amountRemaining": 50000
                         }
                    ],
                    "timestamp": "2026-03-06T08:00:00"
               }
          }
     )
