from .base import Base
from .owner import Owner
from .property import Property, PropertyType, PropertyStatus
from .tenant import Tenant
from .lease import Lease, LeaseStatus
from .payment import Payment, PaymentType, PaymentStatus
from .expense import Expense, ExpenseCategory
from .notification import Notification, NotificationType, NotificationStatus
from .report_snapshot import ReportSnapshot

__all__ = [
     "Base",
     "Owner",
     "Property",
     "PropertyType",
     "PropertyStatus",
     "Tenant",
     "Lease",
     "LeaseStatus",
     "Payment",
     "PaymentType",
     "PaymentStatus",
     "Expense",
     "ExpenseCategory",
     "Notification",
     "NotificationType",
     "NotificationStatus",
     "ReportSnapshot",
]
