"""
Shareable Reports API

Endpoints:
- Create a report from a recent analysis
- Read a report (password via X-Report-Password)
- Update settings, delete
- Track views, read view analytics
- Share link and social payload
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field

from geotest.cache import TTLCache
from geotest.models import CustomBranding, ShareableReport
from geotest.reports import ReportOptions, ReportService, ViewerSession
from geotest.utils.errors import StorageError, ValidationError

from api.dependencies import get_analysis_store, get_report_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/reports", tags=["Reports"])


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class BrandingModel(BaseModel):
    primary_color: str = "#3b82f6"
    secondary_color: str = "#8b5cf6"
    company_name: str = "GEO Tracking Analysis"
    logo: Optional[str] = None


class CreateReportRequest(BaseModel):
    """Create a shareable report from an analysis returned by /api/analyze."""
    analysis_id: str
    client_name: Optional[str] = None
    expires_in_days: Optional[float] = Field(default=None, gt=0)
    password: Optional[str] = None
    custom_branding: Optional[BrandingModel] = None
    share_settings: Dict[str, bool] = Field(default_factory=dict)


class UpdateReportRequest(BaseModel):
    """Only fields that are provided are changed."""
    client_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_public: Optional[bool] = None
    password: Optional[str] = None
    custom_branding: Optional[Dict[str, Any]] = None
    share_settings: Optional[Dict[str, bool]] = None


class TrackViewRequest(BaseModel):
    session_id: Optional[str] = None
    referrer: Optional[str] = None
    device: Optional[str] = None
    screen_width: Optional[int] = None
    actions: Dict[str, Any] = Field(default_factory=dict)
    location: Optional[Dict[str, str]] = None


class ReportResponse(BaseModel):
    """Report as exposed to clients (never includes the password)."""
    id: str
    analysis_id: str
    client_name: str
    website_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_public: bool
    password_protected: bool
    custom_branding: Dict[str, Any]
    analytics: Dict[str, Any]
    share_settings: Dict[str, Any]
    share_url: str


class TrackViewResponse(BaseModel):
    result: str
    session_id: str


def report_to_response(report: ShareableReport, service: ReportService) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        analysis_id=report.analysis_id,
        client_name=report.client_name,
        website_url=report.website_url,
        created_at=report.created_at,
        expires_at=report.expires_at,
        is_public=report.is_public,
        password_protected=bool(report.password),
        custom_branding=report.custom_branding.to_dict(),
        analytics=report.analytics.to_dict(),
        share_settings=report.share_settings.to_dict(),
        share_url=service.generate_shareable_url(report.id),
    )


def _require_access(service: ReportService, report_id: str, password: Optional[str]) -> ShareableReport:
    report = service.get_report(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    if not service.validate_report_access(report_id, password):
        raise HTTPException(status_code=401, detail="Password required")
    return report


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", response_model=ReportResponse, status_code=201)
def create_report(
    request: CreateReportRequest,
    service: ReportService = Depends(get_report_service),
    analyses: TTLCache = Depends(get_analysis_store),
):
    """Create a shareable report."""
    analysis = analyses.get(request.analysis_id)
    if analysis is None:
        raise HTTPException(status_code=404, detail="Analysis not found or no longer retained")

    options = ReportOptions(
        client_name=request.client_name,
        expires_in_days=request.expires_in_days,
        password=request.password,
        custom_branding=CustomBranding(**request.custom_branding.model_dump()) if request.custom_branding else None,
        share_settings=request.share_settings,
    )

    try:
        report = service.create_shareable_report(analysis, options)
    except StorageError as e:
        logger.error(f"Could not save report for {analysis.url}: {e}")
        raise HTTPException(status_code=503, detail="Report storage is unavailable")

    return report_to_response(report, service)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(
    report_id: str,
    service: ReportService = Depends(get_report_service),
    x_report_password: Optional[str] = Header(None),
):
    """Read a report. Password-protected reports need X-Report-Password."""
    report = _require_access(service, report_id, x_report_password)
    return report_to_response(report, service)


@router.patch("/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: str,
    request: UpdateReportRequest,
    service: ReportService = Depends(get_report_service),
    x_report_password: Optional[str] = Header(None),
):
    """Update report settings."""
    _require_access(service, report_id, x_report_password)

    try:
        report = service.update_report_settings(report_id, request.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.error(f"Could not update report {report_id}: {e}")
        raise HTTPException(status_code=503, detail="Report storage is unavailable")

    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return report_to_response(report, service)


@router.delete("/{report_id}", status_code=204)
def delete_report(
    report_id: str,
    service: ReportService = Depends(get_report_service),
    x_report_password: Optional[str] = Header(None),
):
    """Delete a report and its analytics."""
    report = service.get_all_reports().get(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    if report.password and report.password != x_report_password:
        raise HTTPException(status_code=401, detail="Password required")

    try:
        service.delete_report(report_id)
    except StorageError as e:
        logger.error(f"Could not delete report {report_id}: {e}")
        raise HTTPException(status_code=503, detail="Report storage is unavailable")


@router.post("/{report_id}/views", response_model=TrackViewResponse)
def track_view(
    report_id: str,
    request: TrackViewRequest,
    service: ReportService = Depends(get_report_service),
    user_agent: Optional[str] = Header(None),
    referer: Optional[str] = Header(None),
):
    """Record a view of a report."""
    session = ViewerSession(
        user_agent=user_agent or "",
        referrer=referer or "",
        screen_width=request.screen_width,
        session_id=request.session_id,
    )

    partial: Dict[str, Any] = {"actions": request.actions}
    referrer = request.referrer or referer
    if referrer:
        partial["referrer"] = referrer
    partial["device"] = request.device or session.device
    if request.location:
        partial["location"] = request.location

    try:
        result = service.track_report_view(report_id, partial, session=session)
    except StorageError as e:
        logger.error(f"Could not record view of report {report_id}: {e}")
        raise HTTPException(status_code=503, detail="Report storage is unavailable")

    return TrackViewResponse(result=result.value, session_id=session.session_id)


@router.get("/{report_id}/analytics")
def get_analytics(
    report_id: str,
    service: ReportService = Depends(get_report_service),
    x_report_password: Optional[str] = Header(None),
) -> List[Dict[str, Any]]:
    """Detail view records for a report."""
    _require_access(service, report_id, x_report_password)
    return [record.to_dict() for record in service.get_report_analytics(report_id)]


@router.get("/{report_id}/share")
def get_share_data(
    report_id: str,
    service: ReportService = Depends(get_report_service),
    x_report_password: Optional[str] = Header(None),
) -> Dict[str, Any]:
    """Share link and social preview payload."""
    report = _require_access(service, report_id, x_report_password)
    share = service.generate_social_share_data(report)
    return {
        "url": share.url,
        "title": share.title,
        "description": share.description,
        "image": share.image,
        "hashtags": share.hashtags,
    }
