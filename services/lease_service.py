"""
Lease Service - business logic for the lease lifecycle.

Creating, ending and deleting a lease each touch two rows: the lease and
its property's occupancy status. Both writes go through unit_of_work so
they commit or roll back together.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from database import unit_of_work
from models import Lease, Property, Tenant, Payment
from models.lease import LeaseStatus
from models.property import PropertyStatus
from services.deletion_service import ensure_deletable
from services.exceptions import BusinessRuleError, EntityNotFoundError

logger = logging.getLogger(__name__)


class LeaseService:
     """Service class for lease-related business logic."""

     @staticmethod
     def get_lease(db: Session, lease_id: int) -> Lease:
          lease = db.get(Lease, lease_id)
          if lease is None:
               raise EntityNotFoundError("Lease", lease_id)
          return lease

     @staticmethod
     def active_lease_for_property(db: Session, property_id: int) -> Optional[Lease]:
          return db.query(Lease).filter(
               Lease.property_id == property_id,
               Lease.status == LeaseStatus.ACTIVE
          ).first()

     @staticmethod
     def create_lease(
          db: Session,
          tenant_id: int,
          property_id: int,
          start_date: date,
          monthly_rent: Optional[Decimal] = None,
          deposit: Decimal = Decimal("0"),
          advance_months: int = 0,
          end_date: Optional[date] = None,
     ) -> Lease:
          """
          Create an active lease and mark the property occupied.

          Args:
               db: SQLAlchemy database session
               tenant_id: ID of the tenant
               property_id: ID of the property being let
               start_date: Lease start date
               monthly_rent: Agreed rent (defaults to the property's current rent)
               deposit: Security deposit
               advance_months: Months of rent paid in advance
               end_date: Optional planned end date

          Returns:
               Created Lease object

          Raises:
               EntityNotFoundError: If tenant or property doesn't exist
               BusinessRuleError: If the property already has an active lease
          """
          tenant = db.get(Tenant, tenant_id)
          if tenant is None:
               raise EntityNotFoundError("Tenant", tenant_id)

          property_obj = db.get(Property, property_id)
          if property_obj is None:
               raise EntityNotFoundError("Property", property_id)

          if LeaseService.active_lease_for_property(db, property_id) is not None:
               raise BusinessRuleError(f"Property {property_id} already has an active lease")

          if end_date is not None and end_date < start_date:
               raise BusinessRuleError("Lease end date cannot be before its start date")

          with unit_of_work(db):
               lease = Lease(
                    tenant_id=tenant_id,
                    property_id=property_id,
                    monthly_rent=monthly_rent if monthly_rent is not None else property_obj.monthly_rent,
                    deposit=deposit,
                    advance_months=advance_months,
                    start_date=start_date,
                    end_date=end_date,
                    status=LeaseStatus.ACTIVE,
               )
               db.add(lease)
               property_obj.status = PropertyStatus.OCCUPIED

          logger.info("Lease %s created: tenant %s -> property %s", lease.id, tenant_id, property_id)
          return lease

     @staticmethod
     def end_lease(db: Session, lease_id: int, end_date: Optional[date] = None) -> Lease:
          """
          End an active lease and free its property.

          Raises:
               EntityNotFoundError: If the lease doesn't exist
               BusinessRuleError: If the lease is already ended
          """
          lease = LeaseService.get_lease(db, lease_id)
          if lease.status == LeaseStatus.ENDED:
               raise BusinessRuleError(f"Lease {lease_id} is already ended")

          end_date = end_date or date.today()
          if end_date < lease.start_date:
               raise BusinessRuleError("Lease end date cannot be before its start date")

          with unit_of_work(db):
               lease.status = LeaseStatus.ENDED
               lease.end_date = end_date
               lease.property.status = PropertyStatus.AVAILABLE

          logger.info("Lease %s ended on %s", lease_id, end_date)
          return lease

     @staticmethod
     def delete_lease(db: Session, lease_id: int) -> None:
          """
          Delete a lease without payments; an active lease frees its property.

          Raises:
               EntityNotFoundError: If the lease doesn't exist
               DeletionBlockedError: If payments reference the lease
          """
          lease = LeaseService.get_lease(db, lease_id)

          ensure_deletable("lease", lease_id, {
               "payment(s)": db.query(Payment).filter(Payment.lease_id == lease_id),
          })

          with unit_of_work(db):
               if lease.status == LeaseStatus.ACTIVE:
                    lease.property.status = PropertyStatus.AVAILABLE
               db.delete(lease)

          logger.info("Lease %s deleted", lease_id)
