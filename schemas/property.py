"""
Pydantic schemas for Property API request/response validation.

Status is not writable: it follows the lease lifecycle.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.property import PropertyStatus, PropertyType


class PropertyCreate(BaseModel):
     """Schema for creating a new property."""
     owner_id: int = Field(..., gt=0, description="Owner ID (must exist)")
     name: str = Field(..., min_length=1, max_length=255)
     address: str = Field(..., min_length=1, max_length=255)
     type: PropertyType = Field(..., description="house, shop, room or store")
     monthly_rent: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     commission_percent: Decimal = Field(
          default=Decimal("10"), ge=0, le=100, max_digits=5, decimal_places=2,
          description="Agency commission on collected rent"
     )
     description: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "owner_id": 1,
                    "name": "Villa Riviera 3",
                    "address": "Riviera 3, Abidjan",
                    "type": "house",
                    "monthly_rent": 150000,
                    "commission_percent": 10
               }
          }
     )


class PropertyUpdate(BaseModel):
     """Schema for updating an existing property."""
     owner_id: Optional[int] = Field(None, gt=0)
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     address: Optional[str] = Field(None, min_length=1, max_length=255)
     type: Optional[PropertyType] = None
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     commission_percent: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
     description: Optional[str] = None


class PropertyResponse(BaseModel):
     """Schema for property response."""
     id: int
     owner_id: int
     name: str
     address: str
     type: PropertyType
     monthly_rent: Decimal
     commission_percent: Decimal
     status: PropertyStatus
     description: Optional[str] = None
     created_at: datetime

     # Optional related data
     owner_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
     """Schema for paginated property list response."""
     properties: List[PropertyResponse]
     total: int
     page: int = 1
     page_size: int = 50
