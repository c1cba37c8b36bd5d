"""
Expense API routes.

Expenses are charged to a property and reduce its owner's net payout in
the monthly report. A scanned receipt can be attached through
POST /api/expenses/{id}/receipt (stored in Azure Blob Storage).
"""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from azure_blob import EXPENSE_RECEIPTS_CONTAINER, delete_from_blob, upload_to_blob
from database import get_session
from models import Expense, Property
from models.expense import ExpenseCategory
from schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


def _get_expense_or_404(db: Session, expense_id: int) -> Expense:
     expense = db.get(Expense, expense_id)
     if not expense:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Expense with ID {expense_id} not found"
          )
     return expense


def _ensure_property_exists(db: Session, property_id: int) -> None:
     if not db.get(Property, property_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Property with ID {property_id} not found"
          )


@router.post(
     "",
     response_model=ExpenseResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record an expense"
)
def create_expense(expense_data: ExpenseCreate, db: Session = Depends(get_session)):
     _ensure_property_exists(db, expense_data.property_id)

     expense = Expense(**expense_data.model_dump())
     db.add(expense)
     db.commit()
     db.refresh(expense)
     return _build_expense_response(expense)


@router.get(
     "",
     response_model=ExpenseListResponse,
     summary="List expenses with filters"
)
def list_expenses(
     property_id: Optional[int] = Query(None, description="Filter by property ID"),
     category: Optional[ExpenseCategory] = Query(None, description="Filter by category"),
     date_from: Optional[date] = Query(None, description="Expenses on or after this date"),
     date_to: Optional[date] = Query(None, description="Expenses on or before this date"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Expense)
     if property_id:
          query = query.filter(Expense.property_id == property_id)
     if category:
          query = query.filter(Expense.category == category)
     if date_from:
          query = query.filter(Expense.expense_date >= date_from)
     if date_to:
          query = query.filter(Expense.expense_date <= date_to)

     total = query.count()
     offset = (page - 1) * page_size
     expenses = query.order_by(Expense.expense_date.desc(), Expense.id.desc()).offset(offset).limit(page_size).all()

     return ExpenseListResponse(
          expenses=[_build_expense_response(e) for e in expenses],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{expense_id}",
     response_model=ExpenseResponse,
     summary="Get expense by ID"
)
def get_expense(expense_id: int, db: Session = Depends(get_session)):
     return _build_expense_response(_get_expense_or_404(db, expense_id))


@router.put(
     "/{expense_id}",
     response_model=ExpenseResponse,
     summary="Update expense"
)
def update_expense(expense_id: int, expense_data: ExpenseUpdate, db: Session = Depends(get_session)):
     expense = _get_expense_or_404(db, expense_id)
     changes = expense_data.model_dump(exclude_unset=True)

     if changes.get("property_id") is not None:
          _ensure_property_exists(db, changes["property_id"])

     for field, value in changes.items():
          if value is not None:
               setattr(expense, field, value)

     db.commit()
     db.refresh(expense)
     return _build_expense_response(expense)


@router.post(
     "/{expense_id}/receipt",
     response_model=ExpenseResponse,
     summary="Attach a receipt to an expense"
)
def upload_expense_receipt(
     expense_id: int,
     receipt: UploadFile = File(...),
     db: Session = Depends(get_session)
):
     """
     Upload a receipt file and store its URL on the expense. A previously
     attached receipt is removed from storage.
     """
     expense = _get_expense_or_404(db, expense_id)
     previous_url = expense.receipt_url

     expense.receipt_url = upload_to_blob(receipt, EXPENSE_RECEIPTS_CONTAINER, f"property-{expense.property_id}")
     db.commit()

     if previous_url:
          try:
               delete_from_blob(previous_url)
          except Exception as e:
               logger.warning("Could not delete previous receipt %s: %s", previous_url, e)

     db.refresh(expense)
     return _build_expense_response(expense)


@router.delete(
     "/{expense_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete expense"
)
def delete_expense(expense_id: int, db: Session = Depends(get_session)):
     expense = _get_expense_or_404(db, expense_id)
     db.delete(expense)
     db.commit()
     return None


def _build_expense_response(expense: Expense) -> ExpenseResponse:
     response = ExpenseResponse.model_validate(expense)
     response.property_name = expense.property.name if expense.property else None
     return response
