import logging
import os
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from database import change_feed, check_connection
from routers import (
    owners_router,
    properties_router,
    tenants_router,
    leases_router,
    payments_router,
    expenses_router,
    notifications_router,
    reports_router,
)
from services.reporting import ReportCache

# Load .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title="Property management back office")

# CORS
origins = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Computed reports, cleared whenever a table they read is committed
app.state.report_cache = ReportCache()
app.state.report_cache.attach(change_feed)

app.include_router(owners_router)
app.include_router(properties_router)
app.include_router(tenants_router)
app.include_router(leases_router)
app.include_router(payments_router)
app.include_router(expenses_router)
app.include_router(notifications_router)
app.include_router(reports_router)


@app.get("/api/health")
def health():
    return {"status": "ok", "database": check_connection()}


# 404 Fallback Middleware
@app.middleware("http")
async def not_found_middleware(request: Request, call_next):
    try:
        response = await call_next(request)
        if response.status_code == 404 and "endpoint" not in request.scope:
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return response
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
