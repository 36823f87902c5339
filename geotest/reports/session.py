"""
Viewer sessions and identifiers.

A ViewerSession stands in for one browser session: its id is created on
first use and reused for every view tracked through it.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Callable, Optional

BASE36_ALPHABET = string.digits + string.ascii_lowercase

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def random_base36(length: int = 9) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def generate_id(prefix: str, now: datetime) -> str:
    """``{prefix}_{epoch millis}_{9 base36 chars}``"""
    millis = int(now.timestamp() * 1000)
    return f"{prefix}_{millis}_{random_base36()}"


def detect_device(width: Optional[int]) -> str:
    """Classify a viewport width as mobile, tablet or desktop."""
    if width is None:
        return "desktop"
    if width < MOBILE_MAX_WIDTH:
        return "mobile"
    if width < TABLET_MAX_WIDTH:
        return "tablet"
    return "desktop"


class ViewerSession:
    """
    One viewer's session.

    Usage:
        session = ViewerSession(user_agent=request.headers.get("user-agent", ""), screen_width=390)
        service.track_report_view(report_id, {}, session=session)
    """

    def __init__(
        self,
        user_agent: str = "",
        referrer: str = "",
        screen_width: Optional[int] = None,
        session_id: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.user_agent = user_agent
        self.referrer = referrer
        self.screen_width = screen_width
        self._session_id = session_id
        self._clock = clock

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            self._session_id = generate_id("sess", self._clock())
        return self._session_id

    @property
    def device(self) -> str:
        return detect_device(self.screen_width)
