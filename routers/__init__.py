# routers/__init__.py
from routers.owners import router as owners_router
from routers.properties import router as properties_router
from routers.tenants import router as tenants_router
from routers.leases import router as leases_router
from routers.payments import router as payments_router
from routers.expenses import router as expenses_router
from routers.notifications import router as notifications_router
from routers.reports import router as reports_router

__all__ = [
     "owners_router",
     "properties_router",
     "tenants_router",
     "leases_router",
     "payments_router",
     "expenses_router",
     "notifications_router",
     "reports_router",
]
