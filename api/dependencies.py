"""
Shared FastAPI dependencies.

Long-lived collaborators are built once per process; tests replace them
through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from geotest.analyzer import SEOGEOAnalyzer
from geotest.cache import TTLCache
from geotest.integrations import ExternalAPIClients
from geotest.persistence import KeyValueStore, MemoryKeyValueStore, SQLKeyValueStore
from geotest.reports import ReportService
from geotest.utils.config import get_settings

logger = logging.getLogger(__name__)

# Completed analyses stay available for report creation this long
ANALYSIS_RETENTION_SECONDS = 24 * 60 * 60


@lru_cache(maxsize=1)
def get_api_clients() -> ExternalAPIClients:
    clients = ExternalAPIClients()
    clients.config.log_status()
    return clients


@lru_cache(maxsize=1)
def get_analyzer() -> SEOGEOAnalyzer:
    clients = get_api_clients()
    return SEOGEOAnalyzer(
        serper=clients.serper,
        pagespeed=clients.pagespeed,
        cache=TTLCache.from_config(),
    )


@lru_cache(maxsize=1)
def get_analysis_store() -> TTLCache:
    """Recent analyses by id, for turning into reports."""
    return TTLCache(default_ttl=ANALYSIS_RETENTION_SECONDS, max_entries=500)


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    if get_settings().DATABASE_URL:
        return SQLKeyValueStore()
    logger.warning("DATABASE_URL not set, reports are kept in memory only")
    return MemoryKeyValueStore()


def get_report_service() -> ReportService:
    return ReportService(get_store())
