# routers/payments.py
"""
Payment API.

POST /api/payments records one payment row per covered month, so paying
three months of rent at once returns three payments. Arrears over a range
of months go through POST /api/payments/arrears. Receipts group the
payments recorded together for a lease.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Payment
from models.payment import PaymentStatus, PaymentType
from routers.errors import http_error
from schemas.payment import (
     ArrearsPaymentCreate,
     PaymentCreate,
     PaymentListResponse,
     PaymentResponse,
     PaymentUpdate,
)
from services.exceptions import BusinessRuleError, EntityNotFoundError
from services.payment_service import PaymentService
from utils.dates import add_months, format_month, parse_month

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _get_payment_or_404(db: Session, payment_id: int) -> Payment:
     payment = db.get(Payment, payment_id)
     if not payment:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Payment with ID {payment_id} not found"
          )
     return payment


def _parse_month_or_400(value: str):
     try:
          return parse_month(value)
     except ValueError as e:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
     "",
     response_model=PaymentListResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def create_payment(payment_data: PaymentCreate, db: Session = Depends(get_session)):
     """
     Record a payment against a lease.

     Rent and advance payments covering several months (months_count > 1)
     are stored as one payment per month starting at target_month.
     """
     target_month = _parse_month_or_400(payment_data.target_month) if payment_data.target_month else None
     try:
          payments = PaymentService.record_payments(
               db,
               lease_id=payment_data.lease_id,
               payment_type=payment_data.type,
               paid_date=payment_data.paid_date,
               target_month=target_month,
               months_count=payment_data.months_count,
               amount=payment_data.amount,
               status=payment_data.status,
               notes=payment_data.notes,
          )
     except (EntityNotFoundError, BusinessRuleError) as e:
          raise http_error(e)

     db.commit()
     return PaymentListResponse(
          payments=[_build_payment_response(p) for p in payments],
          total=len(payments),
          page=1,
          page_size=max(len(payments), 1)
     )


@router.post(
     "/arrears",
     response_model=PaymentListResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Settle rent arrears"
)
def create_arrears_payment(arrears_data: ArrearsPaymentCreate, db: Session = Depends(get_session)):
     """
     Record the lease's monthly rent for every month from from_month to
     to_month inclusive.
     """
     from_month = _parse_month_or_400(arrears_data.from_month)
     to_month = _parse_month_or_400(arrears_data.to_month)
     try:
          payments = PaymentService.record_arrears(
               db,
               lease_id=arrears_data.lease_id,
               from_month=from_month,
               to_month=to_month,
               paid_date=arrears_data.paid_date,
               notes=arrears_data.notes,
          )
     except (EntityNotFoundError, BusinessRuleError) as e:
          raise http_error(e)

     db.commit()
     return PaymentListResponse(
          payments=[_build_payment_response(p) for p in payments],
          total=len(payments),
          page=1,
          page_size=max(len(payments), 1)
     )


@router.get(
     "",
     response_model=PaymentListResponse,
     summary="List payments with filters"
)
def list_payments(
     lease_id: Optional[int] = Query(None, description="Filter by lease ID"),
     tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
     property_id: Optional[int] = Query(None, description="Filter by property ID"),
     type_filter: Optional[PaymentType] = Query(None, alias="type", description="Filter by payment type"),
     status_filter: Optional[PaymentStatus] = Query(None, alias="status", description="Filter by status"),
     month: Optional[str] = Query(None, description="Filter by target month (YYYY-MM)"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session)
):
     query = db.query(Payment)
     if lease_id:
          query = query.filter(Payment.lease_id == lease_id)
     if tenant_id:
          query = query.filter(Payment.tenant_id == tenant_id)
     if property_id:
          query = query.filter(Payment.property_id == property_id)
     if type_filter:
          query = query.filter(Payment.type == type_filter)
     if status_filter:
          query = query.filter(Payment.status == status_filter)
     if month:
          month_start = _parse_month_or_400(month)
          query = query.filter(
               Payment.target_month >= month_start,
               Payment.target_month < add_months(month_start, 1)
          )

     total = query.count()
     offset = (page - 1) * page_size
     payments = query.order_by(Payment.paid_date.desc(), Payment.id.desc()).offset(offset).limit(page_size).all()

     return PaymentListResponse(
          payments=[_build_payment_response(p) for p in payments],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Get payment by ID"
)
def get_payment(payment_id: int, db: Session = Depends(get_session)):
     return _build_payment_response(_get_payment_or_404(db, payment_id))


@router.get(
     "/{payment_id}/receipt",
     summary="Get the receipt for a payment"
)
def get_payment_receipt(payment_id: int, db: Session = Depends(get_session)):
     """
     Receipt document for the payment and the others recorded with it
     (same lease, type and paid date), one line per month.
     """
     try:
          return PaymentService.build_receipt(db, payment_id)
     except EntityNotFoundError as e:
          raise http_error(e)


@router.put(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Update payment"
)
def update_payment(payment_id: int, payment_data: PaymentUpdate, db: Session = Depends(get_session)):
     payment = _get_payment_or_404(db, payment_id)
     changes = payment_data.model_dump(exclude_unset=True)

     if "target_month" in changes:
          value = changes.pop("target_month")
          if payment.type == PaymentType.DEPOSIT and value:
               raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A deposit payment has no target month"
               )
          payment.target_month = _parse_month_or_400(value) if value else None

     for field, value in changes.items():
          if value is not None:
               setattr(payment, field, value)

     db.commit()
     db.refresh(payment)
     return _build_payment_response(payment)


@router.delete(
     "/{payment_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete payment"
)
def delete_payment(payment_id: int, db: Session = Depends(get_session)):
     payment = _get_payment_or_404(db, payment_id)
     db.delete(payment)
     db.commit()
     return None


def _build_payment_response(payment: Payment) -> PaymentResponse:
     return PaymentResponse(
          id=payment.id,
          lease_id=payment.lease_id,
          tenant_id=payment.tenant_id,
          property_id=payment.property_id,
          amount=payment.amount,
          type=payment.type,
          target_month=format_month(payment.target_month) if payment.target_month else None,
          paid_date=payment.paid_date,
          status=payment.status,
          notes=payment.notes,
          batch_ref=payment.batch_ref,
          created_at=payment.created_at,
          tenant_name=payment.tenant.name if payment.tenant else None,
          property_name=payment.property.name if payment.property else None,
     )
