"""
Shareable Report Service

Creates, reads, updates and deletes shareable reports and records view
analytics against them.

Storage layout (JSON strings in a KeyValueStore):
- ``shareable_reports``: object mapping report id -> report
- ``report_analytics``: list of view records, most recent last, capped

Every call reloads from the store; nothing is kept in memory between calls.
Expired reports read as absent but stay stored until deleted.
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .session import ViewerSession, generate_id
from ..models.analysis import CombinedAnalysis
from ..models.reports import (
    CustomBranding,
    ReportAnalytics,
    ShareableReport,
    ShareSettings,
    SocialShareData,
    ViewActions,
)
from ..persistence.store import KeyValueStore
from ..utils.config import get_settings
from ..utils.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

STORAGE_KEY = "shareable_reports"
ANALYTICS_KEY = "report_analytics"

SHARE_HASHTAGS = ["SEO", "GEOAnalysis", "DigitalMarketing", "WebAnalysis"]

UPDATABLE_FIELDS = {
    "client_name",
    "expires_at",
    "is_public",
    "password",
    "custom_branding",
    "share_settings",
}


class TrackResult(enum.Enum):
    """Outcome of tracking one view."""
    SKIPPED = "skipped"  # report missing, expired, or tracking disabled
    TRACKED = "tracked"
    TRACKED_LOG_FAILED = "tracked_log_failed"  # counters saved, detail record lost


@dataclass
class ReportOptions:
    """Options for creating a report."""
    client_name: Optional[str] = None
    expires_in_days: Optional[float] = None
    password: Optional[str] = None
    custom_branding: Optional[CustomBranding] = None
    share_settings: Dict[str, bool] = field(default_factory=dict)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _bump(buckets: List[Dict[str, Any]], key: str, value: str):
    for bucket in buckets:
        if bucket.get(key) == value:
            bucket["count"] = bucket.get("count", 0) + 1
            return
    buckets.append({key: value, "count": 1})


class ReportService:
    """
    Report lifecycle manager.

    Usage:
        service = ReportService(MemoryKeyValueStore(), base_url="https://geotest.ai")
        report = service.create_shareable_report(analysis, ReportOptions(password="s3cret"))
        service.validate_report_access(report.id, "s3cret")  # True
    """

    def __init__(
        self,
        store: KeyValueStore,
        base_url: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
        session: Optional[ViewerSession] = None,
        analytics_limit: Optional[int] = None,
    ):
        """
        Args:
            store: Persistence backend
            base_url: Public origin for share links (PUBLIC_BASE_URL by default)
            clock: Current-time source (timezone-aware)
            session: Default viewer session for tracked views
            analytics_limit: Max analytics records kept (ANALYTICS_LOG_LIMIT by default)
        """
        settings = get_settings()
        self.store = store
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
        self.clock = clock
        self.session = session or ViewerSession(clock=clock)
        self.analytics_limit = analytics_limit or settings.ANALYTICS_LOG_LIMIT

    # =========================================================================
    # STORAGE
    # =========================================================================

    def _load_json(self, key: str, default):
        raw = self.store.get_item(key)
        if not raw:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error(f"Corrupt JSON under '{key}', treating as empty: {e}")
            return default

    def _save_json(self, key: str, data) -> None:
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Could not serialize '{key}': {e}") from e
        self.store.set_item(key, payload)

    def get_all_reports(self) -> Dict[str, ShareableReport]:
        """Every stored report by id, expired ones included."""
        raw = self._load_json(STORAGE_KEY, {})
        return {report_id: ShareableReport.from_dict(data) for report_id, data in raw.items()}

    def _save_reports(self, reports: Dict[str, ShareableReport]) -> None:
        self._save_json(STORAGE_KEY, {rid: r.to_dict() for rid, r in reports.items()})

    def _load_analytics(self) -> List[Dict[str, Any]]:
        return self._load_json(ANALYTICS_KEY, [])

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def create_shareable_report(
        self,
        analysis: CombinedAnalysis,
        options: Optional[ReportOptions] = None,
    ) -> ShareableReport:
        """
        Create and persist a report for an analysis.

        Raises:
            StorageError: if the report cannot be saved
        """
        options = options or ReportOptions()
        now = self.clock()

        expires_at = None
        if options.expires_in_days:
            expires_at = now + timedelta(days=options.expires_in_days)

        share_settings = ShareSettings()
        for name, value in options.share_settings.items():
            if hasattr(share_settings, name):
                setattr(share_settings, name, bool(value))

        report = ShareableReport(
            id=generate_id("rpt", now),
            analysis_id=analysis.id,
            client_name=options.client_name or f"Analysis for {analysis.url}",
            website_url=analysis.url,
            created_at=now,
            expires_at=expires_at,
            is_public=not options.password,
            password=options.password or None,
            custom_branding=options.custom_branding or CustomBranding(),
            share_settings=share_settings,
        )

        reports = self.get_all_reports()
        reports[report.id] = report
        self._save_reports(reports)

        logger.info(f"Created report {report.id} for {analysis.url}")
        return report

    def get_report(self, report_id: str) -> Optional[ShareableReport]:
        """Report by id, or None if absent or expired."""
        report = self.get_all_reports().get(report_id)
        if report is None:
            return None
        if report.is_expired(self.clock()):
            logger.debug(f"Report {report_id} has expired")
            return None
        return report

    def update_report_settings(
        self,
        report_id: str,
        updates: Dict[str, Any],
    ) -> Optional[ShareableReport]:
        """
        Apply updates to a stored report.

        Setting a password makes the report private; clearing it makes the
        report public again.

        Returns:
            Updated report, or None if no such report exists

        Raises:
            ValidationError: on fields that cannot be updated
            StorageError: if the report cannot be saved
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        reports = self.get_all_reports()
        report = reports.get(report_id)
        if report is None:
            return None

        if "client_name" in updates:
            report.client_name = updates["client_name"]
        if "expires_at" in updates:
            expires_at = updates["expires_at"]
            if isinstance(expires_at, str):
                expires_at = datetime.fromisoformat(expires_at)
            report.expires_at = _as_aware(expires_at)
        if "is_public" in updates:
            report.is_public = bool(updates["is_public"])
        if "password" in updates:
            report.password = updates["password"] or None
            report.is_public = report.password is None
        if "custom_branding" in updates:
            branding = updates["custom_branding"]
            if isinstance(branding, dict):
                branding = CustomBranding.from_dict({**report.custom_branding.to_dict(), **branding})
            report.custom_branding = branding
        if "share_settings" in updates:
            settings = updates["share_settings"]
            if isinstance(settings, dict):
                settings = ShareSettings.from_dict({**report.share_settings.to_dict(), **settings})
            report.share_settings = settings

        if report.password:
            report.is_public = False

        reports[report_id] = report
        self._save_reports(reports)
        return report

    def delete_report(self, report_id: str) -> bool:
        """
        Delete a report and its analytics records.

        Returns:
            False if no such report exists
        """
        reports = self.get_all_reports()
        if report_id not in reports:
            return False

        del reports[report_id]
        self._save_reports(reports)

        remaining = [a for a in self._load_analytics() if a.get("report_id") != report_id]
        self._save_json(ANALYTICS_KEY, remaining)

        logger.info(f"Deleted report {report_id}")
        return True

    def validate_report_access(self, report_id: str, password: Optional[str] = None) -> bool:
        """True if the report exists, is live, and the password (if any) matches."""
        report = self.get_report(report_id)
        if report is None:
            return False
        if report.password and report.password != password:
            return False
        return True

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def track_report_view(
        self,
        report_id: str,
        partial: Optional[Dict[str, Any]] = None,
        session: Optional[ViewerSession] = None,
    ) -> TrackResult:
        """
        Record one view.

        Updates the report's counters and appends a detail record to the
        analytics log.

        Args:
            report_id: Report being viewed
            partial: Known view details (referrer, device, user_agent,
                actions, ip_address, location)
            session: Viewer session (the service default if omitted)

        Returns:
            TrackResult

        Raises:
            StorageError: if the report counters cannot be saved
        """
        partial = partial or {}
        session = session or self.session

        reports = self.get_all_reports()
        report = reports.get(report_id)
        now = self.clock()

        if report is None or report.is_expired(now) or not report.share_settings.track_analytics:
            return TrackResult.SKIPPED

        session_id = session.session_id
        stats = report.analytics
        stats.views += 1
        if session_id not in stats.unique_visitors:
            stats.unique_visitors.append(session_id)
        stats.last_viewed = now

        if partial.get("referrer"):
            _bump(stats.referrers, "source", partial["referrer"])
        if partial.get("device"):
            _bump(stats.devices, "type", partial["device"])
        country = (partial.get("location") or {}).get("country")
        if country:
            _bump(stats.locations, "country", country)

        reports[report_id] = report
        self._save_reports(reports)

        actions = partial.get("actions") or {}
        record = ReportAnalytics(
            report_id=report_id,
            session_id=session_id,
            timestamp=now,
            user_agent=partial.get("user_agent", session.user_agent),
            referrer=partial.get("referrer", session.referrer),
            device=partial.get("device", session.device),
            actions=ViewActions(
                viewed=actions.get("viewed", True),
                downloaded=actions.get("downloaded", False),
                shared=actions.get("shared", False),
                time_spent=actions.get("time_spent", 0),
            ),
            ip_address=partial.get("ip_address"),
            location=partial.get("location"),
        )

        try:
            self._store_analytics(record)
        except StorageError as e:
            logger.error(f"Failed to store analytics for {report_id}: {e}")
            return TrackResult.TRACKED_LOG_FAILED

        return TrackResult.TRACKED

    def _store_analytics(self, record: ReportAnalytics) -> None:
        records = self._load_analytics()
        records.append(record.to_dict())
        self._save_json(ANALYTICS_KEY, records[-self.analytics_limit:])

    def get_report_analytics(self, report_id: str) -> List[ReportAnalytics]:
        """Detail records for one report, oldest first."""
        return [
            ReportAnalytics.from_dict(a)
            for a in self._load_analytics()
            if a.get("report_id") == report_id
        ]

    # =========================================================================
    # SHARING
    # =========================================================================

    def generate_shareable_url(self, report_id: str) -> str:
        return f"{self.base_url}/report/{report_id}"

    def generate_social_share_data(self, report: ShareableReport) -> SocialShareData:
        """Open Graph style share payload for a report."""
        return SocialShareData(
            url=self.generate_shareable_url(report.id),
            title=f"{report.client_name} - GEO Analysis Report",
            description=(
                f"Comprehensive GEO and AI analysis report for {report.website_url}. "
                "Professional insights and actionable recommendations."
            ),
            image=f"{self.base_url}/api/og-image/{report.id}",
            hashtags=list(SHARE_HASHTAGS),
        )
