"""
Pydantic schemas for Tenant API request/response validation.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class TenantCreate(BaseModel):
     """Schema for creating a new tenant."""
     name: str = Field(..., min_length=1, max_length=200)
     phone: str = Field(..., min_length=1, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=255)
     id_document: Optional[str] = Field(None, max_length=100, description="ID card / passport number")


class TenantUpdate(BaseModel):
     """Schema for updating an existing tenant."""
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     phone: Optional[str] = Field(None, min_length=1, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=255)
     id_document: Optional[str] = Field(None, max_length=100)


class TenantResponse(BaseModel):
     """Schema for tenant response."""
     id: int
     name: str
     phone: str
     email: Optional[str] = None
     address: Optional[str] = None
     id_document: Optional[str] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class TenantListResponse(BaseModel):
     """Schema for paginated tenant list response."""
     tenants: List[TenantResponse]
     total: int
     page: int = 1
     page_size: int = 50
