"""
Pydantic schemas for Owner API request/response validation.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class OwnerCreate(BaseModel):
     """Schema for creating a new owner."""
     name: str = Field(..., min_length=1, max_length=200, description="Full name")
     phone: str = Field(..., min_length=1, max_length=50, description="Phone number")
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Awa Diallo",
                    "phone": "+225 07 00 00 00",
                    "email": "awa@example.com",
                    "address": "Cocody, Abidjan"
               }
          }
     )


class OwnerUpdate(BaseModel):
     """Schema for updating an existing owner."""
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     phone: Optional[str] = Field(None, min_length=1, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None


class OwnerResponse(BaseModel):
     """Schema for owner response."""
     id: int
     name: str
     phone: str
     email: Optional[str] = None
     address: Optional[str] = None
     notes: Optional[str] = None
     created_at: datetime
     property_count: int = 0

     model_config = ConfigDict(from_attributes=True)


class OwnerListResponse(BaseModel):
     """Schema for paginated owner list response."""
     owners: List[OwnerResponse]
     total: int
     page: int = 1
     page_size: int = 50
