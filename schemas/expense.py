"""
Pydantic schemas for Expense API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.expense import ExpenseCategory


class ExpenseCreate(BaseModel):
     """Schema for recording an expense on a property."""
     property_id: int = Field(..., gt=0, description="Property ID (must exist)")
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     category: ExpenseCategory = Field(default=ExpenseCategory.OTHER)
     description: str = Field(..., min_length=1)
     expense_date: date

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "amount": 25000,
                    "category": "repair",
                    "description": "Kitchen tap replaced",
                    "expense_date": "2026-03-12"
               }
          }
     )


class ExpenseUpdate(BaseModel):
     """Schema for updating an existing expense."""
     property_id: Optional[int] = Field(None, gt=0)
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     category: Optional[ExpenseCategory] = None
     description: Optional[str] = Field(None, min_length=1)
     expense_date: Optional[date] = None


class ExpenseResponse(BaseModel):
     """Schema for expense response."""
     id: int
     property_id: int
     amount: Decimal
     category: ExpenseCategory
     description: str
     expense_date: date
     receipt_url: Optional[str] = None
     created_at: datetime

     # Optional related data
     property_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class ExpenseListResponse(BaseModel):
     """Schema for paginated expense list response."""
     expenses: List[ExpenseResponse]
     total: int
     page: int = 1
     page_size: int = 50
