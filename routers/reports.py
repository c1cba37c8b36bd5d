"""
Reporting API routes.

- GET  /api/reports/owners/{owner_id}?month=YYYY-MM  owner statement (not persisted)
- POST /api/reports/agency?month=YYYY-MM             agency report, saved as a snapshot
- GET  /api/reports/snapshots                        saved agency reports
- GET  /api/reports/trend?month=YYYY-MM              12-month trend with 2-month forecast
- GET  /api/reports/summary?month=YYYY-MM            revenue/expenses per owner
"""
import json
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_session
from models import ReportSnapshot
from routers.errors import http_error
from schemas.report import ReportSnapshotListResponse, ReportSnapshotResponse
from services.exceptions import EntityNotFoundError
from services.reporting import (
     ReportCache,
     dashboard_overview,
     generate_agency_report,
     generate_owner_report,
     monthly_trend,
     owner_financial_summary,
)
from utils.dates import MONTH_PATTERN, parse_month

router = APIRouter(prefix="/api/reports", tags=["reports"])


def get_report_cache(request: Request) -> Optional[ReportCache]:
     return getattr(request.app.state, "report_cache", None)


def _month_or_current(month: Optional[str]) -> date:
     if not month:
          return date.today().replace(day=1)
     try:
          return parse_month(month)
     except ValueError as e:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _get_snapshot_or_404(db: Session, snapshot_id: int) -> ReportSnapshot:
     snapshot = db.get(ReportSnapshot, snapshot_id)
     if not snapshot:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Report snapshot with ID {snapshot_id} not found"
          )
     return snapshot


@router.get(
     "/owners/{owner_id}",
     summary="Monthly report for an owner"
)
def get_owner_report(
     owner_id: int,
     month: Optional[str] = Query(None, description="Report month (YYYY-MM), defaults to the current month"),
     db: Session = Depends(get_session),
     cache: Optional[ReportCache] = Depends(get_report_cache)
):
     """
     Properties, tenants (rent paid, months covered, arrears, deposits),
     expenses and the owner's net payout after the agency commission.
     """
     report_month = _month_or_current(month)
     try:
          report = generate_owner_report(db, owner_id, report_month, cache=cache)
     except EntityNotFoundError as e:
          raise http_error(e)
     return report.to_dict()


@router.post(
     "/agency",
     status_code=status.HTTP_201_CREATED,
     summary="Generate the agency report for a month"
)
def create_agency_report(
     month: Optional[str] = Query(None, description="Report month (YYYY-MM), defaults to the current month"),
     db: Session = Depends(get_session),
     cache: Optional[ReportCache] = Depends(get_report_cache)
):
     """
     Aggregate every owner's report for the month. Each call stores a new
     snapshot and returns its ID with the report.
     """
     report_month = _month_or_current(month)
     report, snapshot = generate_agency_report(db, report_month, cache=cache)
     db.commit()
     return {"snapshot_id": snapshot.id, "report": report.to_dict()}


@router.get(
     "/snapshots",
     response_model=ReportSnapshotListResponse,
     response_model_exclude_none=True,
     summary="List saved agency reports"
)
def list_snapshots(
     month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Filter by month (YYYY-MM)"),
     db: Session = Depends(get_session)
):
     query = db.query(ReportSnapshot)
     if month:
          query = query.filter(ReportSnapshot.month == month)
     snapshots = query.order_by(ReportSnapshot.created_at.desc(), ReportSnapshot.id.desc()).all()

     return ReportSnapshotListResponse(
          snapshots=[_build_snapshot_response(s) for s in snapshots],
          total=len(snapshots)
     )


@router.get(
     "/snapshots/{snapshot_id}",
     response_model=ReportSnapshotResponse,
     summary="Get a saved agency report"
)
def get_snapshot(snapshot_id: int, db: Session = Depends(get_session)):
     snapshot = _get_snapshot_or_404(db, snapshot_id)
     return _build_snapshot_response(snapshot, include_payload=True)


@router.delete(
     "/snapshots/{snapshot_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete a saved agency report"
)
def delete_snapshot(snapshot_id: int, db: Session = Depends(get_session)):
     snapshot = _get_snapshot_or_404(db, snapshot_id)
     db.delete(snapshot)
     db.commit()
     return None


@router.get(
     "/trend",
     summary="Monthly revenue trend with forecast"
)
def get_trend(
     month: Optional[str] = Query(None, description="Last month of the window (YYYY-MM)"),
     months: int = Query(12, ge=3, le=36, description="Number of historical months"),
     db: Session = Depends(get_session)
):
     return monthly_trend(db, _month_or_current(month), months=months)


@router.get(
     "/summary",
     summary="Revenue and expenses per owner for a month"
)
def get_financial_summary(
     month: Optional[str] = Query(None, description="Month (YYYY-MM)"),
     db: Session = Depends(get_session)
):
     return owner_financial_summary(db, _month_or_current(month))


@router.get(
     "/dashboard",
     summary="Occupancy and payment status figures for the dashboard"
)
def get_dashboard(
     month: Optional[str] = Query(None, description="Last month of the window (YYYY-MM)"),
     months: int = Query(6, ge=1, le=24, description="Number of months of payment figures"),
     db: Session = Depends(get_session)
):
     return dashboard_overview(db, _month_or_current(month), months=months)


def _build_snapshot_response(snapshot: ReportSnapshot, include_payload: bool = False) -> ReportSnapshotResponse:
     return ReportSnapshotResponse(
          id=snapshot.id,
          month=snapshot.month,
          total_revenue=float(snapshot.total_revenue),
          total_expenses=float(snapshot.total_expenses),
          net_profit=float(snapshot.net_profit),
          created_at=snapshot.created_at,
          detail_payload=json.loads(snapshot.detail_payload) if include_payload else None,
     )
