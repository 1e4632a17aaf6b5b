from fastapi import APIRouter
from jalpan.api.v1.endpoints.inspection.reports import router as reports_router
from jalpan.api.v1.endpoints.inspection.forms import router as forms_router
from jalpan.api.v1.endpoints.inspection.analytics import router as analytics_router
from jalpan.api.v1.endpoints.inspection.pdf_export import router as pdf_export_router

api_router = APIRouter()

# PDF export first: /reports/{date}/pdf and /analytics/pdf
api_router.include_router(
    pdf_export_router,
    tags=["PDF Export"]
)

# Reports (history, search, share text, summary)
api_router.include_router(
    reports_router,
    tags=["Reports"]
)

# Inspection form sessions
api_router.include_router(
    forms_router,
    tags=["Inspection Form"]
)

# Range analytics
api_router.include_router(
    analytics_router,
    tags=["Analytics"]
)
