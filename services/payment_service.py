"""
Payment Service - recording payments against leases and building receipts.

Rent and advance payments are recorded one row per month: paying three
months at once produces three payments, each for the lease's monthly rent
and each targeting a consecutive month. Arrears over a range of months
are recorded the same way as rent.
"""
import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Lease, Payment
from models.payment import PaymentStatus, PaymentType
from services.exceptions import BusinessRuleError, EntityNotFoundError
from utils.dates import add_months, long_month_label, month_span, short_month_label
from utils.formatting import CURRENCY, quantize_money, to_decimal

logger = logging.getLogger(__name__)

RECEIPT_TITLES = {
     PaymentType.RENT: "RENT PAYMENT",
     PaymentType.ADVANCE: "RENT ADVANCE",
     PaymentType.DEPOSIT: "SECURITY DEPOSIT",
}


class PaymentService:
     """Service class for payment-related business logic."""

     @staticmethod
     def _new_batch_ref() -> str:
          return uuid.uuid4().hex

     @staticmethod
     def _get_lease(db: Session, lease_id: int) -> Lease:
          lease = db.get(Lease, lease_id)
          if lease is None:
               raise EntityNotFoundError("Lease", lease_id)
          return lease

     @staticmethod
     def record_payments(
          db: Session,
          lease_id: int,
          payment_type: PaymentType,
          paid_date: date,
          target_month: Optional[date] = None,
          months_count: int = 1,
          amount: Optional[Decimal] = None,
          status: PaymentStatus = PaymentStatus.PAID,
          notes: Optional[str] = None,
     ) -> list[Payment]:
          """
          Record one payment per covered month for a lease.

          Args:
               db: SQLAlchemy database session
               lease_id: ID of the lease being paid
               payment_type: rent, advance or deposit
               paid_date: Date the money was received
               target_month: First month covered (defaults to the month of paid_date);
                    ignored for deposits
               months_count: Number of consecutive months covered (rent/advance only)
               amount: Amount per month (defaults to the lease's monthly rent,
                    or its deposit for deposit payments)
               status: Payment status
               notes: Free-text notes

          Returns:
               List of created Payment objects

          Raises:
               EntityNotFoundError: If the lease doesn't exist
               BusinessRuleError: If a deposit spans several months
          """
          lease = PaymentService._get_lease(db, lease_id)

          if payment_type == PaymentType.DEPOSIT:
               if months_count != 1:
                    raise BusinessRuleError("A deposit payment cannot cover several months")
               deposit_amount = amount if amount is not None else lease.deposit
               if not deposit_amount or to_decimal(deposit_amount) <= 0:
                    raise BusinessRuleError("A deposit payment needs a positive amount")
               payment = Payment(
                    lease_id=lease.id,
                    tenant_id=lease.tenant_id,
                    property_id=lease.property_id,
                    amount=deposit_amount,
                    type=payment_type,
                    target_month=None,
                    paid_date=paid_date,
                    status=status,
                    notes=notes,
                    batch_ref=PaymentService._new_batch_ref(),
               )
               db.add(payment)
               db.flush()
               return [payment]

          first_month = (target_month or paid_date).replace(day=1)
          per_month = amount if amount is not None else lease.monthly_rent
          label = "Advance" if payment_type == PaymentType.ADVANCE else "Rent"

          batch_ref = PaymentService._new_batch_ref()
          payments = []
          for index in range(months_count):
               if months_count > 1:
                    line_notes = f"{label} {index + 1}/{months_count} months"
                    if notes:
                         line_notes = f"{line_notes} - {notes}"
               else:
                    line_notes = notes
               payments.append(Payment(
                    lease_id=lease.id,
                    tenant_id=lease.tenant_id,
                    property_id=lease.property_id,
                    amount=per_month,
                    type=payment_type,
                    target_month=add_months(first_month, index),
                    paid_date=paid_date,
                    status=status,
                    notes=line_notes,
                    batch_ref=batch_ref,
               ))

          db.add_all(payments)
          db.flush()
          logger.info(
               "Recorded %s %s payment(s) for lease %s starting %s",
               len(payments), payment_type.value, lease.id, first_month
          )
          return payments

     @staticmethod
     def record_arrears(
          db: Session,
          lease_id: int,
          from_month: date,
          to_month: date,
          paid_date: date,
          notes: Optional[str] = None,
     ) -> list[Payment]:
          """
          Record late rent for every month from from_month to to_month inclusive.

          Raises:
               EntityNotFoundError: If the lease doesn't exist
               BusinessRuleError: If the range is reversed
          """
          if to_month < from_month:
               raise BusinessRuleError("Arrears end month cannot be before the start month")

          lease = PaymentService._get_lease(db, lease_id)
          line_notes = f"Arrears - {notes}" if notes else "Arrears"
          batch_ref = PaymentService._new_batch_ref()

          payments = [
               Payment(
                    lease_id=lease.id,
                    tenant_id=lease.tenant_id,
                    property_id=lease.property_id,
                    amount=lease.monthly_rent,
                    type=PaymentType.RENT,
                    target_month=month,
                    paid_date=paid_date,
                    status=PaymentStatus.PAID,
                    notes=line_notes,
                    batch_ref=batch_ref,
               )
               for month in month_span(from_month, to_month)
          ]
          db.add_all(payments)
          db.flush()
          logger.info("Recorded %s arrears payment(s) for lease %s", len(payments), lease.id)
          return payments

     @staticmethod
     def build_receipt(db: Session, payment_id: int) -> dict:
          """
          Build the receipt document for a payment.

          Payments recorded together (same batch_ref) share one receipt with a
          line per month; a payment without a batch_ref gets its own receipt.
          """
          payment = db.get(Payment, payment_id)
          if payment is None:
               raise EntityNotFoundError("Payment", payment_id)

          if payment.batch_ref is None:
               batch = [payment]
          else:
               batch = (
                    db.query(Payment)
                    .filter(Payment.batch_ref == payment.batch_ref)
                    .order_by(Payment.target_month, Payment.id)
                    .all()
               )

          lines = []
          for index, item in enumerate(batch, start=1):
               if item.type == PaymentType.DEPOSIT:
                    description = "Security deposit"
               elif item.target_month is not None:
                    description = long_month_label(item.target_month)
               else:
                    description = "Monthly rent"
               lines.append({
                    "number": index,
                    "description": description,
                    "amount": float(quantize_money(item.amount)),
               })

          months = [item.target_month for item in batch if item.target_month is not None]
          period = None
          if len(months) > 1:
               period = {
                    "from": f"{short_month_label(months[0])} {months[0].year}",
                    "to": f"{short_month_label(months[-1])} {months[-1].year}",
                    "months": len(months),
               }

          tenant = payment.tenant
          property_obj = payment.property
          return {
               "receipt_number": f"REC-{payment.paid_date:%Y%m}-{payment.id:05d}",
               "title": RECEIPT_TITLES[payment.type],
               "paid_date": payment.paid_date.isoformat(),
               "currency": CURRENCY,
               "tenant": {
                    "name": tenant.name,
                    "phone": tenant.phone,
                    "address": tenant.address,
               },
               "property": {
                    "name": property_obj.name,
                    "address": property_obj.address,
                    "type": property_obj.type.value,
               },
               "lines": lines,
               "total": float(quantize_money(sum((to_decimal(item.amount) for item in batch), Decimal("0")))),
               "period": period,
               "payment_ids": [item.id for item in batch],
          }
