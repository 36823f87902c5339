"""
Tests for shareable reports.

Tests cover:
1. Creation, expiry and password gating
2. Settings updates and the password/public invariant
3. View tracking (counters, buckets, detail log, ring buffer)
4. Deletion cascading to analytics
5. Share links and social payloads
6. Session ids and device detection
"""

import json
import re
import pytest
from datetime import datetime, timezone

from geotest.models import CustomBranding
from geotest.persistence import MemoryKeyValueStore
from geotest.reports import (
    ReportOptions,
    ReportService,
    TrackResult,
    ViewerSession,
    detect_device,
    generate_id,
)
from geotest.reports.service import ANALYTICS_KEY, STORAGE_KEY
from geotest.utils.errors import StorageError, ValidationError


class FailingAnalyticsStore(MemoryKeyValueStore):
    """Rejects writes to the analytics log only."""

    def set_item(self, key, value):
        if key == ANALYTICS_KEY:
            raise StorageError("quota exceeded")
        super().set_item(key, value)


@pytest.fixture
async def report(report_service, sample_analysis):
    return report_service.create_shareable_report(sample_analysis)


@pytest.fixture
async def private_report(report_service, sample_analysis):
    return report_service.create_shareable_report(sample_analysis, ReportOptions(password="s3cret"))


# ============================================================================
# Creation and Access
# ============================================================================

class TestCreate:
    """Tests for create_shareable_report"""

    async def test_defaults(self, report, sample_analysis, clock):
        assert re.fullmatch(r"rpt_\d+_[0-9a-z]{9}", report.id)
        assert report.analysis_id == sample_analysis.id
        assert report.client_name == "Analysis for https://example.com"
        assert report.website_url == "https://example.com"
        assert report.created_at == clock()
        assert report.expires_at is None
        assert report.is_public is True
        assert report.password is None
        assert report.analytics.views == 0
        assert report.share_settings.track_analytics is True

    async def test_options(self, report_service, sample_analysis, clock):
        options = ReportOptions(
            client_name="Acme Corp",
            expires_in_days=7,
            custom_branding=CustomBranding(company_name="Acme Agency"),
            share_settings={"allow_download": False, "unknown_flag": True},
        )
        report = report_service.create_shareable_report(sample_analysis, options)

        assert report.client_name == "Acme Corp"
        assert (report.expires_at - clock()).days == 7
        assert report.custom_branding.company_name == "Acme Agency"
        assert report.share_settings.allow_download is False

    async def test_password_makes_report_private(self, private_report):
        assert private_report.is_public is False
        assert private_report.password == "s3cret"

    async def test_report_persisted_as_json(self, report, memory_store):
        stored = json.loads(memory_store.get_item(STORAGE_KEY))
        assert stored[report.id]["website_url"] == "https://example.com"

    async def test_round_trip_through_store(self, report, report_service):
        assert report_service.get_report(report.id) == report


class TestAccess:
    """Tests for get_report and validate_report_access"""

    async def test_missing_report(self, report_service):
        assert report_service.get_report("rpt_missing") is None
        assert report_service.validate_report_access("rpt_missing") is False

    async def test_expired_report_reads_as_absent(self, report_service, sample_analysis, clock):
        report = report_service.create_shareable_report(sample_analysis, ReportOptions(expires_in_days=1))

        clock.advance(days=2)

        assert report_service.get_report(report.id) is None
        assert report_service.validate_report_access(report.id) is False
        assert report.id in report_service.get_all_reports()

    async def test_report_live_until_expiry_instant(self, report_service, sample_analysis, clock):
        report = report_service.create_shareable_report(sample_analysis, ReportOptions(expires_in_days=1))
        clock.advance(days=1)
        assert report_service.get_report(report.id) is not None

    async def test_public_report_needs_no_password(self, report, report_service):
        assert report_service.validate_report_access(report.id) is True
        assert report_service.validate_report_access(report.id, "anything") is True

    async def test_password_gating(self, private_report, report_service):
        assert report_service.validate_report_access(private_report.id) is False
        assert report_service.validate_report_access(private_report.id, "wrong") is False
        assert report_service.validate_report_access(private_report.id, "s3cret") is True

    async def test_corrupt_storage_reads_as_empty(self, clock):
        service = ReportService(
            MemoryKeyValueStore({STORAGE_KEY: "{not json"}),
            base_url="https://geotest.test",
            clock=clock,
        )
        assert service.get_all_reports() == {}


# ============================================================================
# Updates
# ============================================================================

class TestUpdate:
    """Tests for update_report_settings"""

    async def test_setting_password_makes_private(self, report, report_service):
        updated = report_service.update_report_settings(report.id, {"password": "pw"})
        assert updated.is_public is False
        assert report_service.validate_report_access(report.id, "pw") is True

    async def test_clearing_password_makes_public(self, private_report, report_service):
        updated = report_service.update_report_settings(private_report.id, {"password": ""})
        assert updated.password is None
        assert updated.is_public is True

    async def test_cannot_publish_while_password_set(self, private_report, report_service):
        updated = report_service.update_report_settings(private_report.id, {"is_public": True})
        assert updated.is_public is False

    async def test_partial_branding_merge(self, report, report_service):
        updated = report_service.update_report_settings(
            report.id, {"custom_branding": {"primary_color": "#000000"}}
        )
        assert updated.custom_branding.primary_color == "#000000"
        assert updated.custom_branding.company_name == "GEO Tracking Analysis"

    async def test_naive_expiry_treated_as_utc(self, report, report_service, clock):
        report_service.update_report_settings(report.id, {"expires_at": datetime(2026, 1, 16, 12, 0)})

        stored = report_service.get_report(report.id)
        assert stored.expires_at == datetime(2026, 1, 16, 12, 0, tzinfo=timezone.utc)

        clock.advance(days=2)
        assert report_service.get_report(report.id) is None

    async def test_iso_string_expiry(self, report, report_service):
        updated = report_service.update_report_settings(
            report.id, {"expires_at": "2026-02-01T00:00:00+00:00"}
        )
        assert updated.expires_at == datetime(2026, 2, 1, tzinfo=timezone.utc)

    async def test_unknown_fields_rejected(self, report, report_service):
        with pytest.raises(ValidationError):
            report_service.update_report_settings(report.id, {"website_url": "https://evil.example"})

    async def test_missing_report(self, report_service):
        assert report_service.update_report_settings("rpt_missing", {"client_name": "x"}) is None


# ============================================================================
# View Tracking
# ============================================================================

class TestTracking:
    """Tests for track_report_view"""

    async def test_counters_and_buckets(self, report, report_service):
        result = report_service.track_report_view(
            report.id,
            {
                "referrer": "https://twitter.com",
                "device": "mobile",
                "location": {"country": "SE", "city": "Stockholm"},
            },
        )
        report_service.track_report_view(report.id, {"referrer": "https://twitter.com", "device": "desktop"})

        stats = report_service.get_report(report.id).analytics
        assert result is TrackResult.TRACKED
        assert stats.views == 2
        assert stats.unique_visitors == ["sess_test_viewer"]
        assert stats.referrers == [{"source": "https://twitter.com", "count": 2}]
        assert stats.devices == [{"type": "mobile", "count": 1}, {"type": "desktop", "count": 1}]
        assert stats.locations == [{"country": "SE", "count": 1}]

    async def test_unique_visitors_per_session(self, report, report_service, clock):
        for session_id in ("sess_a", "sess_b", "sess_a"):
            report_service.track_report_view(report.id, {}, session=ViewerSession(session_id=session_id))

        stats = report_service.get_report(report.id).analytics
        assert stats.views == 3
        assert stats.unique_visitors == ["sess_a", "sess_b"]
        assert stats.last_viewed == clock()

    async def test_detail_record_defaults_from_session(self, report, report_service):
        report_service.track_report_view(report.id, {"actions": {"time_spent": 42}})

        [record] = report_service.get_report_analytics(report.id)
        assert record.session_id == "sess_test_viewer"
        assert record.user_agent == "pytest-agent"
        assert record.device == "desktop"
        assert record.actions.viewed is True
        assert record.actions.time_spent == 42

    async def test_partial_overrides_session(self, report, report_service):
        report_service.track_report_view(report.id, {"user_agent": "curl/8", "device": "tablet"})
        [record] = report_service.get_report_analytics(report.id)
        assert record.user_agent == "curl/8"
        assert record.device == "tablet"

    async def test_skipped_for_missing_expired_or_disabled(self, report_service, sample_analysis, clock):
        assert report_service.track_report_view("rpt_missing") is TrackResult.SKIPPED

        untracked = report_service.create_shareable_report(
            sample_analysis, ReportOptions(share_settings={"track_analytics": False})
        )
        assert report_service.track_report_view(untracked.id) is TrackResult.SKIPPED

        expiring = report_service.create_shareable_report(sample_analysis, ReportOptions(expires_in_days=1))
        clock.advance(days=2)
        assert report_service.track_report_view(expiring.id) is TrackResult.SKIPPED
        assert report_service.get_report_analytics(expiring.id) == []

    async def test_analytics_log_is_capped(self, sample_analysis, memory_store, clock, viewer):
        service = ReportService(
            memory_store, base_url="https://geotest.test", clock=clock, session=viewer, analytics_limit=3,
        )
        report = service.create_shareable_report(sample_analysis)

        for _ in range(5):
            service.track_report_view(report.id)
            clock.advance(minutes=1)

        records = service.get_report_analytics(report.id)
        assert len(records) == 3
        assert records[0].timestamp == datetime(2026, 1, 15, 12, 2, tzinfo=timezone.utc)
        assert service.get_report(report.id).analytics.views == 5

    async def test_log_failure_keeps_counters(self, sample_analysis, clock, viewer):
        service = ReportService(
            FailingAnalyticsStore(), base_url="https://geotest.test", clock=clock, session=viewer,
        )
        report = service.create_shareable_report(sample_analysis)

        result = service.track_report_view(report.id)

        assert result is TrackResult.TRACKED_LOG_FAILED
        assert service.get_report(report.id).analytics.views == 1


# ============================================================================
# Deletion
# ============================================================================

class TestDelete:
    """Tests for delete_report"""

    async def test_delete_removes_report_and_its_analytics(self, report_service, sample_analysis):
        doomed = report_service.create_shareable_report(sample_analysis)
        kept = report_service.create_shareable_report(sample_analysis)
        report_service.track_report_view(doomed.id)
        report_service.track_report_view(kept.id)

        assert report_service.delete_report(doomed.id) is True

        assert report_service.get_report(doomed.id) is None
        assert report_service.get_report_analytics(doomed.id) == []
        assert len(report_service.get_report_analytics(kept.id)) == 1

    async def test_delete_missing(self, report_service):
        assert report_service.delete_report("rpt_missing") is False


# ============================================================================
# Sharing
# ============================================================================

class TestSharing:
    """Tests for share links."""

    async def test_shareable_url(self, report, report_service):
        assert report_service.generate_shareable_url(report.id) == f"https://geotest.test/report/{report.id}"

    def test_base_url_trailing_slash(self, memory_store):
        service = ReportService(memory_store, base_url="https://geotest.test/")
        assert service.generate_shareable_url("rpt_1") == "https://geotest.test/report/rpt_1"

    async def test_social_share_data(self, report, report_service):
        share = report_service.generate_social_share_data(report)

        assert share.url == f"https://geotest.test/report/{report.id}"
        assert share.title == "Analysis for https://example.com - GEO Analysis Report"
        assert "https://example.com" in share.description
        assert share.image == f"https://geotest.test/api/og-image/{report.id}"
        assert share.hashtags == ["SEO", "GEOAnalysis", "DigitalMarketing", "WebAnalysis"]


# ============================================================================
# Sessions
# ============================================================================

class TestSessions:
    """Tests for ids and viewer sessions."""

    def test_generate_id_format(self, clock):
        generated = generate_id("sess", clock())
        prefix, millis, suffix = generated.split("_")
        assert prefix == "sess"
        assert int(millis) == int(clock().timestamp() * 1000)
        assert re.fullmatch(r"[0-9a-z]{9}", suffix)

    def test_ids_are_unique(self, clock):
        assert len({generate_id("rpt", clock()) for _ in range(100)}) == 100

    @pytest.mark.parametrize("width,device", [(None, "desktop"), (390, "mobile"), (767, "mobile"),
                                              (768, "tablet"), (1023, "tablet"), (1024, "desktop")])
    def test_detect_device(self, width, device):
        assert detect_device(width) == device

    def test_session_id_is_stable(self, clock):
        session = ViewerSession(clock=clock)
        assert session.session_id.startswith("sess_")
        assert session.session_id == session.session_id


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
