from fastapi import APIRouter

from diamond_valuation.api.v1.health import router as health_router
from diamond_valuation.api.v1.auth import router as auth_router
from diamond_valuation.api.v1.directory import router as directory_router
from diamond_valuation.api.v1.valuation_records import router as valuation_records_router
from diamond_valuation.api.v1.views import router as views_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# READ-ONLY COLLABORATORS (services / users / receipts)
# ------------------------------------------------------------------
v1_router.include_router(directory_router, tags=["directory"])

# ------------------------------------------------------------------
# VALUATION RECORDS
# ------------------------------------------------------------------
v1_router.include_router(valuation_records_router, tags=["valuation-records"])

# ------------------------------------------------------------------
# VIEWS (consultant detail / customer tracking)
# ------------------------------------------------------------------
v1_router.include_router(views_router, tags=["views"])
