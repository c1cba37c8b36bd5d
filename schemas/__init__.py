from .owner import OwnerCreate, OwnerUpdate, OwnerResponse, OwnerListResponse
from .property import PropertyCreate, PropertyUpdate, PropertyResponse, PropertyListResponse
from .tenant import TenantCreate, TenantUpdate, TenantResponse, TenantListResponse
from .lease import LeaseCreate, LeaseUpdate, LeaseEndRequest, LeaseResponse, LeaseListResponse
from .payment import (
     PaymentCreate,
     ArrearsPaymentCreate,
     PaymentUpdate,
     PaymentResponse,
     PaymentListResponse,
)
from .expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from .notification import (
     NotificationCreate,
     NotificationUpdate,
     NotificationResponse,
     NotificationListResponse,
     OverdueRentCheckResponse,
)
from .report import ReportSnapshotResponse, ReportSnapshotListResponse

__all__ = [
     "OwnerCreate",
     "OwnerUpdate",
     "OwnerResponse",
     "OwnerListResponse",
     "PropertyCreate",
     "PropertyUpdate",
     "PropertyResponse",
     "PropertyListResponse",
     "TenantCreate",
     "TenantUpdate",
     "TenantResponse",
     "TenantListResponse",
     "LeaseCreate",
     "LeaseUpdate",
     "LeaseEndRequest",
     "LeaseResponse",
     "LeaseListResponse",
     "PaymentCreate",
     "ArrearsPaymentCreate",
     "PaymentUpdate",
     "PaymentResponse",
     "PaymentListResponse",
     "ExpenseCreate",
     "ExpenseUpdate",
     "ExpenseResponse",
     "ExpenseListResponse",
     "NotificationCreate",
     "NotificationUpdate",
     "NotificationResponse",
     "NotificationListResponse",
     "OverdueRentCheckResponse",
     "ReportSnapshotResponse",
     "ReportSnapshotListResponse",
]
