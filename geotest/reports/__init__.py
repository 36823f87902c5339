"""
Shareable Reports

Report lifecycle (create, read, update, delete), password gating, expiry,
view analytics and social share payloads.
"""

from .session import ViewerSession, detect_device, generate_id
from .service import ReportService, ReportOptions, TrackResult

__all__ = [
    "ViewerSession",
    "detect_device",
    "generate_id",
    "ReportService",
    "ReportOptions",
    "TrackResult",
]
