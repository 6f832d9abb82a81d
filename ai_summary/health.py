"""
Configuration health report for the admin surface.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from ai_summary.config import AppSettings, validate_api_key
from ai_summary.db.session import check_connection
from ai_summary.status import HealthReport
from ai_summary.storage.cache import SummaryCache
from ai_summary.utils import is_valid_url

logger = logging.getLogger(__name__)


def build_health_report(
    settings: AppSettings,
    engine: Optional[Engine] = None,
    cache: Optional[SummaryCache] = None,
) -> HealthReport:
    """Check configuration, database and cache.

    Missing API key or an unreachable database are errors (``critical``);
    everything else is a warning.
    """
    report = HealthReport()

    if not settings.api_key:
        report.add_error("API key is not configured")
        report.checks["api_key"] = "missing"
    elif not validate_api_key(settings.api_key, settings.provider):
        report.add_warning(f"API key does not look like a valid {settings.provider} key")
        report.checks["api_key"] = "suspicious"
    else:
        report.checks["api_key"] = "ok"

    report.checks["provider"] = settings.provider
    report.checks["model"] = settings.model

    if engine is not None:
        if check_connection(engine):
            report.checks["database"] = "ok"
        else:
            report.add_error("Database connection failed")
            report.checks["database"] = "unavailable"

    if cache is not None:
        report.checks["cache_backend"] = settings.cache.backend
        if settings.cache.backend == "none":
            report.add_warning("Cache is disabled")

    if not is_valid_url(settings.site.url):
        report.add_warning(f"Site URL is not a valid URL: {settings.site.url}")

    if report.errors:
        logger.warning(f"Health check critical: {'; '.join(report.errors)}")
    return report
