"""
Shareable Report Models

Reports are persisted as JSON through a key-value store, so each model
round-trips through ``to_dict`` / ``from_dict`` with ISO-8601 timestamps.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass
class CustomBranding:
    primary_color: str = "#3b82f6"
    secondary_color: str = "#8b5cf6"
    company_name: str = "GEO Tracking Analysis"
    logo: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
            "company_name": self.company_name,
            "logo": self.logo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomBranding":
        return cls(
            primary_color=data.get("primary_color", "#3b82f6"),
            secondary_color=data.get("secondary_color", "#8b5cf6"),
            company_name=data.get("company_name", "GEO Tracking Analysis"),
            logo=data.get("logo"),
        )


@dataclass
class ShareSettings:
    allow_download: bool = True
    allow_sharing: bool = True
    track_analytics: bool = True
    require_contact: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allow_download": self.allow_download,
            "allow_sharing": self.allow_sharing,
            "track_analytics": self.track_analytics,
            "require_contact": self.require_contact,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShareSettings":
        return cls(
            allow_download=data.get("allow_download", True),
            allow_sharing=data.get("allow_sharing", True),
            track_analytics=data.get("track_analytics", True),
            require_contact=data.get("require_contact", False),
        )


@dataclass
class ReportViewStats:
    """Aggregated analytics stored on the report itself."""
    views: int = 0
    unique_visitors: List[str] = field(default_factory=list)
    last_viewed: Optional[datetime] = None
    referrers: List[Dict[str, Any]] = field(default_factory=list)  # {source, count}
    devices: List[Dict[str, Any]] = field(default_factory=list)  # {type, count}
    locations: List[Dict[str, Any]] = field(default_factory=list)  # {country, count}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "views": self.views,
            "unique_visitors": list(self.unique_visitors),
            "last_viewed": _iso(self.last_viewed),
            "referrers": [dict(r) for r in self.referrers],
            "devices": [dict(d) for d in self.devices],
            "locations": [dict(loc) for loc in self.locations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportViewStats":
        return cls(
            views=data.get("views", 0),
            unique_visitors=list(data.get("unique_visitors", [])),
            last_viewed=_parse(data.get("last_viewed")),
            referrers=list(data.get("referrers", [])),
            devices=list(data.get("devices", [])),
            locations=list(data.get("locations", [])),
        )


@dataclass
class ShareableReport:
    """
    Durable, shareable wrapper around one analysis.

    A report with ``expires_at`` in the past is treated as gone even though
    its record stays in the store until explicitly deleted.
    """
    id: str
    analysis_id: str
    client_name: str
    website_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_public: bool = True
    password: Optional[str] = None
    custom_branding: CustomBranding = field(default_factory=CustomBranding)
    analytics: ReportViewStats = field(default_factory=ReportViewStats)
    share_settings: ShareSettings = field(default_factory=ShareSettings)

    def is_expired(self, now: datetime) -> bool:
        """Check if report has expired."""
        return self.expires_at is not None and now > self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "analysis_id": self.analysis_id,
            "client_name": self.client_name,
            "website_url": self.website_url,
            "created_at": _iso(self.created_at),
            "expires_at": _iso(self.expires_at),
            "is_public": self.is_public,
            "password": self.password,
            "custom_branding": self.custom_branding.to_dict(),
            "analytics": self.analytics.to_dict(),
            "share_settings": self.share_settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShareableReport":
        return cls(
            id=data["id"],
            analysis_id=data.get("analysis_id", ""),
            client_name=data.get("client_name", ""),
            website_url=data.get("website_url", ""),
            created_at=_parse(data["created_at"]),
            expires_at=_parse(data.get("expires_at")),
            is_public=data.get("is_public", True),
            password=data.get("password"),
            custom_branding=CustomBranding.from_dict(data.get("custom_branding") or {}),
            analytics=ReportViewStats.from_dict(data.get("analytics") or {}),
            share_settings=ShareSettings.from_dict(data.get("share_settings") or {}),
        )


@dataclass
class ViewActions:
    viewed: bool = True
    downloaded: bool = False
    shared: bool = False
    time_spent: int = 0  # seconds


@dataclass
class ReportAnalytics:
    """One tracked view or action on a report."""
    report_id: str
    session_id: str
    timestamp: datetime
    user_agent: str = ""
    referrer: str = ""
    device: str = "desktop"  # desktop | mobile | tablet
    actions: ViewActions = field(default_factory=ViewActions)
    ip_address: Optional[str] = None
    location: Optional[Dict[str, str]] = None  # {country, city}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "session_id": self.session_id,
            "timestamp": _iso(self.timestamp),
            "user_agent": self.user_agent,
            "referrer": self.referrer,
            "device": self.device,
            "actions": {
                "viewed": self.actions.viewed,
                "downloaded": self.actions.downloaded,
                "shared": self.actions.shared,
                "time_spent": self.actions.time_spent,
            },
            "ip_address": self.ip_address,
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportAnalytics":
        actions = data.get("actions") or {}
        return cls(
            report_id=data["report_id"],
            session_id=data.get("session_id", ""),
            timestamp=_parse(data["timestamp"]),
            user_agent=data.get("user_agent", ""),
            referrer=data.get("referrer", ""),
            device=data.get("device", "desktop"),
            actions=ViewActions(
                viewed=actions.get("viewed", True),
                downloaded=actions.get("downloaded", False),
                shared=actions.get("shared", False),
                time_spent=actions.get("time_spent", 0),
            ),
            ip_address=data.get("ip_address"),
            location=data.get("location"),
        )


@dataclass
class SocialShareData:
    url: str
    title: str
    description: str
    image: Optional[str] = None
    hashtags: List[str] = field(default_factory=list)
