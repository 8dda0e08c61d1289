# timesheet-backend/app/api/v1/endpoints/reports.py
import logging
from datetime import date, datetime, timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.analytics import DEFAULT_RANGE_DAYS, ReportParams, date_range, load_entries
from app.core.config import settings
from app.core.errors import NotFound
from app.db import models, session
from app.core import security
from app.schemas import analytics as analytics_schema
from app.schemas import report as report_schema
from app.services import analytics
from app.services.scope import resolve_scope

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Helper Functions ---

def get_visible_report(db: Session, report_id: int, user: models.User) -> models.CustomReport:
    scope = resolve_scope(user)
    report = db.query(models.CustomReport).filter(
        models.CustomReport.id == report_id, scope.report_clause()
    ).first()
    if report is None:
        raise NotFound("Report not found")
    return report


def get_editable_report(db: Session, report_id: int, user: models.User) -> models.CustomReport:
    report = get_visible_report(db, report_id, user)
    if user.role != "ADMIN" and report.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the owner can change this report")
    return report


def params_from_filters(filters: dict) -> ReportParams:
    """Reads the stored report filters with the same defaults as the analytics endpoints."""
    try:
        end = date.fromisoformat(filters["endDate"]) if filters.get("endDate") else date.today()
        start = (
            date.fromisoformat(filters["startDate"]) if filters.get("startDate")
            else end - timedelta(days=DEFAULT_RANGE_DAYS)
        )
        expected = float(filters.get("expectedHoursPerDay") or settings.EXPECTED_HOURS_PER_DAY)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid report filters: {exc}")
    if start > end or not 0 < expected <= 24:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid report filters")
    return ReportParams(
        start_date=start, end_date=end, department=filters.get("department"), expected_hours_per_day=expected,
    )


# --- API Endpoints ---

@router.get("", response_model=List[report_schema.Report])
def list_reports(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Reports in the caller's scope, newest first. """
    scope = resolve_scope(current_user)
    return (
        db.query(models.CustomReport)
        .filter(scope.report_clause())
        .order_by(models.CustomReport.created_at.desc(), models.CustomReport.id.desc())
        .all()
    )


@router.post("", response_model=report_schema.Report, status_code=status.HTTP_201_CREATED)
def create_report(
    report_in: report_schema.ReportCreate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    report = models.CustomReport(
        user_id=current_user.id, department=current_user.department, **report_in.model_dump()
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


@router.put("/{report_id}", response_model=report_schema.Report)
def update_report(
    report_id: int,
    report_in: report_schema.ReportUpdate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    report = get_editable_report(db, report_id, current_user)
    for field, value in report_in.model_dump().items():
        setattr(report, field, value)
    db.commit()
    db.refresh(report)
    return report


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    report = get_editable_report(db, report_id, current_user)
    db.delete(report)
    db.commit()
    return


@router.post("/{report_id}/run", response_model=report_schema.ReportRun)
def run_report(
    report_id: int,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """
    Computes the summary for the report's stored filters, scoped to whoever
    runs it, and stamps the run time.
    """
    report = get_visible_report(db, report_id, current_user)
    params = params_from_filters(report.filters or {})
    scope = resolve_scope(current_user, params.department)
    entries = load_entries(db, scope, params)
    result = analytics_schema.SummaryReport(
        scope=scope.describe(),
        range=date_range(params),
        summary=analytics.summarize(entries, params.expected_hours_per_day),
    )

    report.last_run = datetime.utcnow()
    db.commit()
    db.refresh(report)
    logger.info("User %s ran report %s over %d entries", current_user.email, report.id, len(entries))
    return {"report": report, "result": result}
