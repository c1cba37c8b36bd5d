"""
Pydantic schemas for Lease API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models.lease import LeaseStatus


class LeaseCreate(BaseModel):
     """Schema for creating a new lease."""
     tenant_id: int = Field(..., gt=0, description="Tenant ID (must exist)")
     property_id: int = Field(..., gt=0, description="Property ID (must be available)")
     monthly_rent: Optional[Decimal] = Field(
          None, gt=0, max_digits=12, decimal_places=2,
          description="Agreed rent; defaults to the property's rent"
     )
     deposit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     advance_months: int = Field(default=0, ge=0, le=24)
     start_date: date
     end_date: Optional[date] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenant_id": 1,
                    "property_id": 1,
                    "monthly_rent": 150000,
                    "deposit": 300000,
                    "advance_months": 2,
                    "start_date": "2026-03-01"
               }
          }
     )

     @model_validator(mode="after")
     def check_dates(self):
          if self.end_date is not None and self.end_date < self.start_date:
               raise ValueError("end_date cannot be before start_date")
          return self


class LeaseUpdate(BaseModel):
     """Schema for updating lease terms (status changes go through /end)."""
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     advance_months: Optional[int] = Field(None, ge=0, le=24)
     start_date: Optional[date] = None
     end_date: Optional[date] = None


class LeaseEndRequest(BaseModel):
     """Schema for ending a lease."""
     end_date: Optional[date] = Field(None, description="Defaults to today")


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: int
     tenant_id: int
     property_id: int
     monthly_rent: Decimal
     deposit: Decimal
     advance_months: int
     start_date: date
     end_date: Optional[date] = None
     status: LeaseStatus
     created_at: datetime

     # Optional related data
     tenant_name: Optional[str] = None
     property_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class LeaseListResponse(BaseModel):
     """Schema for paginated lease list response."""
     leases: List[LeaseResponse]
     total: int
     page: int = 1
     page_size: int = 50
