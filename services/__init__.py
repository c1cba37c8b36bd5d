from .exceptions import BusinessRuleError, DeletionBlockedError, EntityNotFoundError
from .lease_service import LeaseService
from .payment_service import PaymentService
from .deletion_service import delete_owner, delete_property, delete_tenant
from .rent_sweep import check_overdue_rents
from .reporting import (
     ReportCache,
     generate_owner_report,
     generate_agency_report,
     owner_financial_summary,
     monthly_trend,
)

__all__ = [
     "BusinessRuleError",
     "DeletionBlockedError",
     "EntityNotFoundError",
     "LeaseService",
     "PaymentService",
     "delete_owner",
     "delete_property",
     "delete_tenant",
     "check_overdue_rents",
     "ReportCache",
     "generate_owner_report",
     "generate_agency_report",
     "owner_financial_summary",
     "monthly_trend",
]
