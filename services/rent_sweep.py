"""
Overdue Rent Sweep - daily check that records rent reminders.

For every active lease:
1. Sum the rent payments targeting the current calendar month
2. The lease is late when paid < monthly rent and the grace period has passed
3. A late tenant gets one rent reminder per month

A reminder is inserted only after an existence check on this month's
reminders; the unique (tenant, type, period) index catches a concurrent
sweep that slipped past the check, and that insert is skipped.
"""
import logging
import os
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import requests
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models import Lease, Notification, Payment
from models.lease import LeaseStatus
from models.notification import NotificationStatus, NotificationType
from models.payment import PaymentType
from utils.dates import add_months, format_month
from utils.email import EmailDeliveryError, send_rent_reminder_email
from utils.formatting import format_amount, to_decimal

logger = logging.getLogger(__name__)

GRACE_PERIOD_DAYS = int(os.getenv("RENT_GRACE_PERIOD_DAYS", "5"))
REMINDER_EMAILS_ENABLED = os.getenv("REMINDER_EMAILS_ENABLED", "false").lower() == "true"


def rent_paid_for_month(db: Session, lease_id: int, month_start: date) -> Decimal:
     """Total of the lease's rent payments whose target month is month_start's month."""
     total = (
          db.query(func.coalesce(func.sum(Payment.amount), 0))
          .filter(
               Payment.lease_id == lease_id,
               Payment.type == PaymentType.RENT,
               Payment.target_month >= month_start,
               Payment.target_month < add_months(month_start, 1),
          )
          .scalar()
     )
     return to_decimal(total)


def reminder_sent_this_month(db: Session, tenant_id: int, month_start: date) -> bool:
     """True if a rent reminder for the tenant was created during month_start's month."""
     window_start = datetime.combine(month_start, time.min)
     window_end = datetime.combine(add_months(month_start, 1), time.min)
     existing = (
          db.query(Notification.id)
          .filter(
               Notification.tenant_id == tenant_id,
               Notification.type == NotificationType.RENT_REMINDER,
               Notification.created_at >= window_start,
               Notification.created_at < window_end,
          )
          .first()
     )
     return existing is not None


def build_reminder_message(property_name: str, due: Decimal, paid: Decimal, remaining: Decimal) -> str:
     return (
          f"Reminder: the rent of {format_amount(due)} for {property_name} is overdue. "
          f"Amount paid: {format_amount(paid)}. Remaining: {format_amount(remaining)}."
     )


def _insert_reminder(db: Session, notification: Notification) -> bool:
     """Insert inside a savepoint; False if the unique index rejected it."""
     try:
          with db.begin_nested():
               db.add(notification)
     except IntegrityError:
          logger.warning(
               "Rent reminder for tenant %s in %s was already recorded by another sweep",
               notification.tenant_id, notification.period
          )
          return False
     return True


def _deliver_by_email(notification: Notification, tenant) -> None:
     try:
          send_rent_reminder_email(tenant.email, tenant.name, notification.message)
     except (EmailDeliveryError, requests.RequestException) as e:
          logger.error("Could not email rent reminder to tenant %s: %s", tenant.id, e)
          notification.status = NotificationStatus.FAILED


def check_overdue_rents(db: Session, now: Optional[datetime] = None) -> dict:
     """
     Run the overdue-rent sweep once.

     Args:
          db: SQLAlchemy database session
          now: Clock override (defaults to the current local time)

     Returns:
          {success, message, notificationsCreated, overdueContracts, details, timestamp};
          details lists the reminders created by this run and
          overdueContracts is its length.
     """
     now = now or datetime.now()
     month_start = now.date().replace(day=1)
     period = format_month(month_start)

     logger.info("Starting overdue rent check for %s (day %s)", period, now.day)

     active_leases = (
          db.query(Lease)
          .options(joinedload(Lease.tenant), joinedload(Lease.property))
          .filter(Lease.status == LeaseStatus.ACTIVE)
          .order_by(Lease.id)
          .all()
     )
     logger.info("Found %s active lease(s)", len(active_leases))

     late_count = 0
     created_count = 0
     details = []

     for lease in active_leases:
          tenant = lease.tenant
          try:
               with db.begin_nested():
                    paid = rent_paid_for_month(db, lease.id, month_start)
          except SQLAlchemyError:
               logger.exception("Error fetching payments for lease %s, skipping", lease.id)
               continue

          due = to_decimal(lease.monthly_rent)
          is_late = paid < due and now.day >= GRACE_PERIOD_DAYS
          logger.debug("Lease %s (%s): due=%s paid=%s late=%s", lease.id, tenant.name, due, paid, is_late)

          if not is_late:
               continue
          late_count += 1

          if reminder_sent_this_month(db, tenant.id, month_start):
               logger.info("Reminder already sent this month for %s", tenant.name)
               continue

          remaining = due - paid
          use_email = REMINDER_EMAILS_ENABLED and bool(tenant.email)
          notification = Notification(
               tenant_id=tenant.id,
               type=NotificationType.RENT_REMINDER,
               message=build_reminder_message(lease.property.name, due, paid, remaining),
               channel="email" if use_email else "app",
               status=NotificationStatus.SENT,
               period=period,
               sent_at=now,
               created_at=now,
          )
          if not _insert_reminder(db, notification):
               continue
          if use_email:
               _deliver_by_email(notification, tenant)

          created_count += 1
          logger.info("Rent reminder created for %s", tenant.name)
          details.append({
               "tenantName": tenant.name,
               "propertyName": lease.property.name,
               "amountDue": float(due),
               "amountPaid": float(paid),
               "amountRemaining": float(remaining),
          })

     db.commit()

     result = {
          "success": True,
          "message": f"Checked {len(active_leases)} lease(s)",
          "notificationsCreated": created_count,
          "overdueContracts": len(details),
          "details": details,
          "timestamp": now.isoformat(),
     }
     logger.info(
          "Overdue rent check completed: %s reminder(s) created, %s late lease(s)",
          created_count, late_count
     )
     return result
