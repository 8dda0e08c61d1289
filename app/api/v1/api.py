# timesheet-backend/app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import admin, analytics, departments, reports, settings, tasks, timesheet, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(departments.router, prefix="/departments", tags=["Departments"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(timesheet.router, prefix="/timesheet", tags=["Timesheet"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
