# File: routers/router/all_endpoints.py

from fastapi import APIRouter

from api.routers.admin import manage_users, update_report_status
from api.routers.live import report_events
from api.routers.reports import create_report, get_reports
from api.routers.users import profile
from api.routers.utility_routes import router as utility_router


# Main router
all_routers = APIRouter()

# Include routers
all_routers.include_router(create_report.router)
all_routers.include_router(get_reports.router)

all_routers.include_router(update_report_status.router)
all_routers.include_router(manage_users.router)

all_routers.include_router(profile.router)

all_routers.include_router(report_events.router)
all_routers.include_router(utility_router)
