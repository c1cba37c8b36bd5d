"""
Pydantic schemas for Payment API request/response validation.

Months are exchanged as "YYYY-MM" strings.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models.payment import PaymentStatus, PaymentType
from utils.dates import MONTH_PATTERN


class PaymentCreate(BaseModel):
     """Schema for recording a payment (one row per covered month)."""
     lease_id: int = Field(..., gt=0, description="Lease ID (must exist)")
     type: PaymentType = Field(default=PaymentType.RENT)
     amount: Optional[Decimal] = Field(
          None, gt=0, max_digits=12, decimal_places=2,
          description="Amount per month; defaults to the lease's monthly rent (or deposit)"
     )
     target_month: Optional[str] = Field(
          None, pattern=MONTH_PATTERN,
          description="First month covered (YYYY-MM); defaults to the paid date's month"
     )
     months_count: int = Field(default=1, ge=1, le=24)
     paid_date: date
     status: PaymentStatus = Field(default=PaymentStatus.PAID)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "lease_id": 1,
                    "type": "rent",
                    "target_month": "2026-03",
                    "months_count": 2,
                    "paid_date": "2026-03-02"
               }
          }
     )

     @model_validator(mode="after")
     def check_deposit(self):
          if self.type == PaymentType.DEPOSIT and self.months_count != 1:
               raise ValueError("A deposit payment cannot cover several months")
          return self


class ArrearsPaymentCreate(BaseModel):
     """Schema for settling rent arrears over a range of months."""
     lease_id: int = Field(..., gt=0)
     from_month: str = Field(..., pattern=MONTH_PATTERN)
     to_month: str = Field(..., pattern=MONTH_PATTERN)
     paid_date: date
     notes: Optional[str] = None

     @model_validator(mode="after")
     def check_range(self):
          if self.to_month < self.from_month:
               raise ValueError("to_month cannot be before from_month")
          return self


class PaymentUpdate(BaseModel):
     """Schema for updating an existing payment."""
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     target_month: Optional[str] = Field(None, pattern=MONTH_PATTERN)
     paid_date: Optional[date] = None
     status: Optional[PaymentStatus] = None
     notes: Optional[str] = None


class PaymentResponse(BaseModel):
     """Schema for payment response."""
     id: int
     lease_id: int
     tenant_id: int
     property_id: int
     amount: Decimal
     type: PaymentType
     target_month: Optional[str] = None
     paid_date: date
     status: PaymentStatus
     notes: Optional[str] = None
     batch_ref: Optional[str] = None
     created_at: datetime

     # Optional related data
     tenant_name: Optional[str] = None
     property_name: Optional[str] = None


class PaymentListResponse(BaseModel):
     """Schema for paginated payment list response."""
     payments: List[PaymentResponse]
     total: int
     page: int = 1
     page_size: int = 50
