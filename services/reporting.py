"""
Reporting Service - monthly aggregation per owner and agency-wide.

A report month is loaded once into a MonthDataset:
- leases active at any point during the month
  (start <= month_end AND (end IS NULL OR end >= month_start))
- payments whose target month OR paid date falls in the month
- expenses dated in the month

Owner and agency reports are pure functions of that dataset. The agency
report is the sum of the owner reports, so the agency commission is exactly
the sum of the per-owner commissions (each rounded once, to the cent).

Computed reports are kept in a ReportCache that subscribes to the data
store's change feed and is cleared whenever a source table changes.
"""
import json
import logging
import os
import threading
from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from models import Expense, Lease, Owner, Payment, Property, ReportSnapshot
from models.payment import PaymentStatus, PaymentType
from models.property import PropertyStatus
from services.exceptions import EntityNotFoundError
from utils.dates import add_months, format_month, month_bounds, short_month_label
from utils.formatting import quantize_money, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_COMMISSION_PERCENT = Decimal(os.getenv("DEFAULT_COMMISSION_PERCENT", "10"))

COLLECTED_TYPES = (PaymentType.RENT, PaymentType.ADVANCE)

ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Report structures
# ---------------------------------------------------------------------------

@dataclass
class TenantLine:
     lease_id: int
     tenant_id: int
     tenant_name: str
     property_name: str
     monthly_rent: Decimal
     months_paid: list[str]
     amount_paid: Decimal
     arrears: Decimal
     deposit_paid: Decimal


@dataclass
class ExpenseLine:
     expense_id: int
     description: str
     category: str
     amount: Decimal
     property_name: str
     expense_date: date


@dataclass
class PropertyLine:
     property_id: int
     name: str
     address: str
     type: str
     monthly_rent: Decimal
     commission_percent: Decimal
     status: str
     occupied: bool


@dataclass
class OwnerTotals:
     property_count: int = 0
     occupied_count: int = 0
     vacant_count: int = 0
     total_rent: Decimal = ZERO
     total_arrears: Decimal = ZERO
     total_deposits: Decimal = ZERO
     total_expenses: Decimal = ZERO
     average_commission_percent: Decimal = ZERO
     commission: Decimal = ZERO
     net_payable: Decimal = ZERO


@dataclass
class OwnerReport:
     month: str
     owner_id: int
     owner_name: str
     owner_phone: Optional[str]
     owner_email: Optional[str]
     properties: list[PropertyLine] = field(default_factory=list)
     tenants: list[TenantLine] = field(default_factory=list)
     expenses: list[ExpenseLine] = field(default_factory=list)
     totals: OwnerTotals = field(default_factory=OwnerTotals)

     def to_dict(self) -> dict:
          return _jsonable(asdict(self))


@dataclass
class AgencyOwnerLine:
     owner_id: int
     owner_name: str
     total_rent: Decimal
     total_expenses: Decimal
     commission: Decimal
     amount_paid_out: Decimal


@dataclass
class AgencyTotals:
     total_rent: Decimal = ZERO
     total_expenses: Decimal = ZERO
     total_commission: Decimal = ZERO
     net_profit: Decimal = ZERO
     property_count: int = 0
     occupied_count: int = 0
     vacant_count: int = 0
     tenant_count: int = 0


@dataclass
class AgencyReport:
     month: str
     owners: list[AgencyOwnerLine] = field(default_factory=list)
     totals: AgencyTotals = field(default_factory=AgencyTotals)

     def to_dict(self) -> dict:
          return _jsonable(asdict(self))


def _jsonable(value):
     """Decimals become floats and dates ISO strings, recursively."""
     if isinstance(value, dict):
          return {key: _jsonable(item) for key, item in value.items()}
     if isinstance(value, list):
          return [_jsonable(item) for item in value]
     if isinstance(value, Decimal):
          return float(value)
     if isinstance(value, date):
          return value.isoformat()
     return value


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------

@dataclass
class MonthDataset:
     """Everything a report month needs, loaded in one batch of reads."""
     month_start: date
     month_end: date
     owners: list[Owner]
     properties: list[Property]
     leases: list[Lease]
     payments: list[Payment]
     expenses: list[Expense]

     @property
     def month(self) -> str:
          return format_month(self.month_start)

     def properties_of(self, owner_id: int) -> list[Property]:
          return [p for p in self.properties if p.owner_id == owner_id]


def load_month_dataset(db: Session, month: date) -> MonthDataset:
     month_start, month_end = month_bounds(month)

     leases = (
          db.query(Lease)
          .options(joinedload(Lease.tenant))
          .filter(
               Lease.start_date <= month_end,
               or_(Lease.end_date.is_(None), Lease.end_date >= month_start),
          )
          .order_by(Lease.id)
          .all()
     )
     payments = (
          db.query(Payment)
          .filter(
               or_(
                    and_(Payment.target_month >= month_start, Payment.target_month <= month_end),
                    and_(Payment.paid_date >= month_start, Payment.paid_date <= month_end),
               )
          )
          .order_by(Payment.id)
          .all()
     )
     expenses = (
          db.query(Expense)
          .filter(Expense.expense_date >= month_start, Expense.expense_date <= month_end)
          .order_by(Expense.expense_date, Expense.id)
          .all()
     )
     owners = db.query(Owner).order_by(Owner.name, Owner.id).all()
     properties = db.query(Property).order_by(Property.name, Property.id).all()

     logger.debug(
          "Loaded %s: %s lease(s), %s payment(s), %s expense(s)",
          format_month(month_start), len(leases), len(payments), len(expenses)
     )
     return MonthDataset(
          month_start=month_start,
          month_end=month_end,
          owners=owners,
          properties=properties,
          leases=leases,
          payments=payments,
          expenses=expenses,
     )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def average_commission_percent(properties: list[Property]) -> Decimal:
     """Unweighted mean of the properties' commission rates; the default rate when there are none."""
     if not properties:
          return DEFAULT_COMMISSION_PERCENT
     rates = [
          to_decimal(p.commission_percent) if p.commission_percent is not None else DEFAULT_COMMISSION_PERCENT
          for p in properties
     ]
     return sum(rates, ZERO) / len(rates)


def compute_commission(total_rent: Decimal, average_percent: Decimal) -> Decimal:
     return quantize_money(total_rent * average_percent / 100)


def months_paid_labels(payments: list[Payment]) -> list[str]:
     """Short names of the months covered, each listed once, in calendar order."""
     months = sorted({payment.covered_month() for payment in payments})
     return [short_month_label(month) for month in months]


def build_tenant_line(lease: Lease, property_obj: Property, payments: list[Payment]) -> TenantLine:
     collected = [p for p in payments if p.type in COLLECTED_TYPES]
     deposits = [p for p in payments if p.type == PaymentType.DEPOSIT]

     monthly_rent = to_decimal(lease.monthly_rent)
     amount_paid = sum((to_decimal(p.amount) for p in collected), ZERO)

     return TenantLine(
          lease_id=lease.id,
          tenant_id=lease.tenant_id,
          tenant_name=lease.tenant.name,
          property_name=property_obj.name,
          monthly_rent=monthly_rent,
          months_paid=months_paid_labels(collected),
          amount_paid=amount_paid,
          arrears=max(ZERO, monthly_rent - amount_paid),
          deposit_paid=sum((to_decimal(p.amount) for p in deposits), ZERO),
     )


def build_owner_report(dataset: MonthDataset, owner: Owner) -> OwnerReport:
     """Aggregate one owner's month from an already loaded dataset."""
     properties = dataset.properties_of(owner.id)
     by_id = {p.id: p for p in properties}

     leases = [lease for lease in dataset.leases if lease.property_id in by_id]
     payments_by_lease: dict[int, list[Payment]] = {}
     for payment in dataset.payments:
          payments_by_lease.setdefault(payment.lease_id, []).append(payment)

     tenants = [
          build_tenant_line(lease, by_id[lease.property_id], payments_by_lease.get(lease.id, []))
          for lease in leases
     ]
     expenses = [
          ExpenseLine(
               expense_id=expense.id,
               description=expense.description,
               category=expense.category.value,
               amount=to_decimal(expense.amount),
               property_name=by_id[expense.property_id].name,
               expense_date=expense.expense_date,
          )
          for expense in dataset.expenses
          if expense.property_id in by_id
     ]

     occupied_ids = {lease.property_id for lease in leases}
     property_lines = [
          PropertyLine(
               property_id=p.id,
               name=p.name,
               address=p.address,
               type=p.type.value,
               monthly_rent=to_decimal(p.monthly_rent),
               commission_percent=to_decimal(p.commission_percent),
               status=p.status.value,
               occupied=p.id in occupied_ids,
          )
          for p in properties
     ]

     total_rent = sum((line.amount_paid for line in tenants), ZERO)
     total_expenses = sum((line.amount for line in expenses), ZERO)
     average_percent = average_commission_percent(properties)
     commission = compute_commission(total_rent, average_percent)

     totals = OwnerTotals(
          property_count=len(properties),
          occupied_count=len(occupied_ids),
          vacant_count=len(properties) - len(occupied_ids),
          total_rent=total_rent,
          total_arrears=sum((line.arrears for line in tenants), ZERO),
          total_deposits=sum((line.deposit_paid for line in tenants), ZERO),
          total_expenses=total_expenses,
          average_commission_percent=quantize_money(average_percent),
          commission=commission,
          net_payable=total_rent - total_expenses - commission,
     )

     return OwnerReport(
          month=dataset.month,
          owner_id=owner.id,
          owner_name=owner.name,
          owner_phone=owner.phone,
          owner_email=owner.email,
          properties=property_lines,
          tenants=tenants,
          expenses=expenses,
          totals=totals,
     )


def build_agency_report(dataset: MonthDataset) -> AgencyReport:
     """Sum every owner's report into the agency totals."""
     report = AgencyReport(month=dataset.month)
     totals = report.totals

     for owner in dataset.owners:
          owner_report = build_owner_report(dataset, owner)
          owner_totals = owner_report.totals
          report.owners.append(AgencyOwnerLine(
               owner_id=owner.id,
               owner_name=owner.name,
               total_rent=owner_totals.total_rent,
               total_expenses=owner_totals.total_expenses,
               commission=owner_totals.commission,
               amount_paid_out=owner_totals.net_payable,
          ))
          totals.total_rent += owner_totals.total_rent
          totals.total_expenses += owner_totals.total_expenses
          totals.total_commission += owner_totals.commission

     occupied_ids = {lease.property_id for lease in dataset.leases}
     totals.net_profit = totals.total_commission
     totals.property_count = len(dataset.properties)
     totals.occupied_count = len(occupied_ids)
     totals.vacant_count = totals.property_count - totals.occupied_count
     totals.tenant_count = len({lease.tenant_id for lease in dataset.leases})
     return report


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class ReportCache:
     """
     Computed reports keyed by (kind, month, owner).

     Subscribes to the change feed for every table a report reads and
     drops all entries when any of them changes. Each invalidation bumps
     `generation`; a report built from data read before the bump is not
     stored.

     Usage:
          generation = cache.generation
          report = build(...)
          cache.put(key, report, generation)
     """

     WATCHED_TABLES = ("owners", "properties", "tenants", "leases", "payments", "expenses")

     def __init__(self):
          self._entries: dict[tuple, object] = {}
          self._generation = 0
          self._lock = threading.Lock()

     @property
     def generation(self) -> int:
          return self._generation

     def get(self, key: tuple):
          return self._entries.get(key)

     def put(self, key: tuple, value, generation: Optional[int] = None) -> bool:
          """Store value unless the cache was invalidated since `generation`."""
          with self._lock:
               if generation is not None and generation != self._generation:
                    logger.debug("Discarding report %s built before the last invalidation", key)
                    return False
               self._entries[key] = value
          return True

     def invalidate(self, table: Optional[str] = None) -> None:
          with self._lock:
               self._generation += 1
               if self._entries:
                    logger.debug("Report cache invalidated by change to %s", table or "all tables")
               self._entries.clear()

     def attach(self, feed) -> None:
          feed.subscribe(self.WATCHED_TABLES, self.invalidate)

     def __len__(self):
          return len(self._entries)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def generate_owner_report(
     db: Session,
     owner_id: int,
     month: date,
     cache: Optional[ReportCache] = None,
) -> OwnerReport:
     """
     Owner report for a month. Owner reports are never persisted.

     Raises:
          EntityNotFoundError: If the owner doesn't exist
     """
     generation = cache.generation if cache is not None else None
     owner = db.get(Owner, owner_id)
     if owner is None:
          raise EntityNotFoundError("Owner", owner_id)

     key = ("owner", format_month(month), owner_id)
     if cache is not None:
          cached = cache.get(key)
          if cached is not None:
               return cached

     report = build_owner_report(load_month_dataset(db, month), owner)
     logger.info("Owner report generated for owner %s, %s", owner_id, report.month)
     if cache is not None:
          cache.put(key, report, generation)
     return report


def generate_agency_report(
     db: Session,
     month: date,
     cache: Optional[ReportCache] = None,
) -> tuple[AgencyReport, ReportSnapshot]:
     """Agency report for a month, persisted as a new snapshot row."""
     key = ("agency", format_month(month), None)
     report = cache.get(key) if cache is not None else None
     if report is None:
          generation = cache.generation if cache is not None else None
          report = build_agency_report(load_month_dataset(db, month))
          if cache is not None:
               cache.put(key, report, generation)

     snapshot = save_snapshot(db, report)
     logger.info("Agency report generated for %s (snapshot %s)", report.month, snapshot.id)
     return report, snapshot


def save_snapshot(db: Session, report: AgencyReport) -> ReportSnapshot:
     snapshot = ReportSnapshot(
          month=report.month,
          total_revenue=report.totals.total_rent,
          total_expenses=report.totals.total_expenses,
          net_profit=report.totals.net_profit,
          detail_payload=json.dumps(report.to_dict()),
     )
     db.add(snapshot)
     db.flush()
     return snapshot


def owner_financial_summary(db: Session, month: date) -> dict:
     """
     Revenue, expenses and profit per owner for a month.

     Unlike the owner report, revenue here is every payment received in the
     month (by paid date), whatever its type or target month.
     """
     month_start, month_end = month_bounds(month)
     payments = (
          db.query(Payment)
          .options(joinedload(Payment.property))
          .filter(Payment.paid_date >= month_start, Payment.paid_date <= month_end)
          .all()
     )
     expenses = (
          db.query(Expense)
          .options(joinedload(Expense.property))
          .filter(Expense.expense_date >= month_start, Expense.expense_date <= month_end)
          .all()
     )

     rows = []
     for owner in db.query(Owner).order_by(Owner.name, Owner.id).all():
          revenue = sum((to_decimal(p.amount) for p in payments if p.property.owner_id == owner.id), ZERO)
          charges = sum((to_decimal(e.amount) for e in expenses if e.property.owner_id == owner.id), ZERO)
          rows.append({
               "owner_id": owner.id,
               "owner_name": owner.name,
               "revenue": revenue,
               "expenses": charges,
               "profit": revenue - charges,
          })

     total_revenue = sum((row["revenue"] for row in rows), ZERO)
     total_expenses = sum((row["expenses"] for row in rows), ZERO)
     return _jsonable({
          "month": format_month(month_start),
          "owners": rows,
          "totals": {
               "revenue": total_revenue,
               "expenses": total_expenses,
               "profit": total_revenue - total_expenses,
          },
     })


def monthly_trend(db: Session, last_month: date, months: int = 12) -> dict:
     """
     Revenue/expenses/profit for the `months` months ending at last_month,
     followed by a two-month forecast: the mean of the last three months,
     with revenue growing 2% in the second forecast month.
     """
     first_month = add_months(last_month, -(months - 1))
     _, window_end = month_bounds(last_month)

     payments = db.query(Payment.paid_date, Payment.amount).filter(
          Payment.paid_date >= first_month, Payment.paid_date <= window_end
     ).all()
     expenses = db.query(Expense.expense_date, Expense.amount).filter(
          Expense.expense_date >= first_month, Expense.expense_date <= window_end
     ).all()

     revenue_by_month: dict[date, Decimal] = {}
     for paid_date, amount in payments:
          bucket = paid_date.replace(day=1)
          revenue_by_month[bucket] = revenue_by_month.get(bucket, ZERO) + to_decimal(amount)
     expenses_by_month: dict[date, Decimal] = {}
     for expense_date, amount in expenses:
          bucket = expense_date.replace(day=1)
          expenses_by_month[bucket] = expenses_by_month.get(bucket, ZERO) + to_decimal(amount)

     historical = []
     for offset in range(months):
          month = add_months(first_month, offset)
          revenue = revenue_by_month.get(month, ZERO)
          charges = expenses_by_month.get(month, ZERO)
          historical.append({
               "month": format_month(month),
               "label": f"{short_month_label(month)} {month:%y}",
               "revenue": revenue,
               "expenses": charges,
               "profit": revenue - charges,
               "forecast": False,
          })

     recent = historical[-3:]
     average_revenue = quantize_money(sum((m["revenue"] for m in recent), ZERO) / 3)
     average_expenses = quantize_money(sum((m["expenses"] for m in recent), ZERO) / 3)

     forecast = []
     for offset, growth in ((1, Decimal("1")), (2, Decimal("1.02"))):
          month = add_months(last_month, offset)
          revenue = quantize_money(average_revenue * growth)
          forecast.append({
               "month": format_month(month),
               "label": f"{short_month_label(month)} {month:%y}",
               "revenue": revenue,
               "expenses": average_expenses,
               "profit": revenue - average_expenses,
               "forecast": True,
          })

     return _jsonable({"historical": historical, "forecast": forecast})


def _percent_of(part: int, total: int) -> int:
     if not total:
          return 0
     return int((Decimal(part) * 100 / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def dashboard_overview(db: Session, last_month: date, months: int = 6) -> dict:
     """
     Figures for the back-office dashboard.

     occupancy counts properties by their current status. payment_status
     sums payment amounts by status for each of the `months` months ending
     at last_month, bucketed by paid date; revenue is the paid amount.
     """
     status_counts = dict(
          db.query(Property.status, func.count(Property.id)).group_by(Property.status).all()
     )
     occupied = status_counts.get(PropertyStatus.OCCUPIED, 0)
     available = status_counts.get(PropertyStatus.AVAILABLE, 0)
     total = occupied + available

     first_month = add_months(last_month, -(months - 1))
     _, window_end = month_bounds(last_month)
     payments = db.query(Payment.paid_date, Payment.status, Payment.amount).filter(
          Payment.paid_date >= first_month, Payment.paid_date <= window_end
     ).all()

     buckets = {
          add_months(first_month, offset): {status: ZERO for status in PaymentStatus}
          for offset in range(months)
     }
     for paid_date, payment_status, amount in payments:
          bucket = buckets[paid_date.replace(day=1)]
          bucket[payment_status] += to_decimal(amount)

     payment_rows = []
     for month, totals in buckets.items():
          payment_rows.append({
               "month": format_month(month),
               "label": short_month_label(month),
               "paid": totals[PaymentStatus.PAID],
               "pending": totals[PaymentStatus.PENDING],
               "late": totals[PaymentStatus.LATE],
               "revenue": totals[PaymentStatus.PAID],
          })

     return _jsonable({
          "occupancy": {
               "occupied": occupied,
               "available": available,
               "total": total,
               "occupancy_rate": _percent_of(occupied, total),
               "vacancy_rate": _percent_of(available, total),
          },
          "payment_status": payment_rows,
     })
