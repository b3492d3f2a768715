from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_report_store
from app.schemas import Report, ReportList
from app.services.report_store import ReportStore

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=ReportList)
async def list_reports(store: ReportStore = Depends(get_report_store)):
    reports = store.list()
    return ReportList(count=len(reports), reports=reports)


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, store: ReportStore = Depends(get_report_store)):
    report = store.get(report_id)
    if not report:
        raise HTTPException(404, "Report not found")
    return report
