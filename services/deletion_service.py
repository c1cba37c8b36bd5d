"""
Guarded deletes for owners, properties and tenants.

Each delete first counts the rows that still reference the entity and
refuses with DeletionBlockedError (naming every blocking dependent and its
count) instead of relying on the database to reject the statement.
"""
from sqlalchemy.orm import Query, Session

from models import Owner, Property, Tenant, Lease, Expense
from models.lease import LeaseStatus
from services.exceptions import DeletionBlockedError, EntityNotFoundError


def count_dependents(checks: dict[str, Query]) -> dict[str, int]:
     """Run each count query and keep only the non-zero ones."""
     counts = {label: query.count() for label, query in checks.items()}
     return {label: count for label, count in counts.items() if count}


def ensure_deletable(entity: str, entity_id: int, checks: dict[str, Query]) -> None:
     blockers = count_dependents(checks)
     if blockers:
          raise DeletionBlockedError(entity, entity_id, blockers)


def delete_owner(db: Session, owner_id: int) -> None:
     owner = db.get(Owner, owner_id)
     if owner is None:
          raise EntityNotFoundError("Owner", owner_id)

     ensure_deletable("owner", owner_id, {
          "property(ies)": db.query(Property).filter(Property.owner_id == owner_id),
     })

     db.delete(owner)
     db.flush()


def delete_property(db: Session, property_id: int) -> None:
     property_obj = db.get(Property, property_id)
     if property_obj is None:
          raise EntityNotFoundError("Property", property_id)

     leases = db.query(Lease).filter(Lease.property_id == property_id)
     ensure_deletable("property", property_id, {
          "active lease(s)": leases.filter(Lease.status == LeaseStatus.ACTIVE),
          "ended lease(s)": leases.filter(Lease.status == LeaseStatus.ENDED),
          "expense(s)": db.query(Expense).filter(Expense.property_id == property_id),
     })

     db.delete(property_obj)
     db.flush()


def delete_tenant(db: Session, tenant_id: int) -> None:
     tenant = db.get(Tenant, tenant_id)
     if tenant is None:
          raise EntityNotFoundError("Tenant", tenant_id)

     leases = db.query(Lease).filter(Lease.tenant_id == tenant_id)
     ensure_deletable("tenant", tenant_id, {
          "active lease(s)": leases.filter(Lease.status == LeaseStatus.ACTIVE),
          "ended lease(s)": leases.filter(Lease.status == LeaseStatus.ENDED),
     })

     # Notifications keep their history; the tenant reference is nulled.
     db.delete(tenant)
     db.flush()
