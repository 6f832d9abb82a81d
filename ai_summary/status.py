"""
Generation status tracking.

Provides enums and result structures for single and bulk summary
generation runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GenerationStatus(str, Enum):
    """Outcome of one generation attempt for one document."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"  # Existing summary, not forced


class HealthStatus(str, Enum):
    """Overall health of the service configuration."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class BulkGenerationResult:
    """Counters for a bulk generation run."""

    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> int:
        return self.success + self.failed + self.skipped

    def record(self, item_id: Any, status: GenerationStatus) -> None:
        if status is GenerationStatus.SUCCESS:
            self.success += 1
        elif status is GenerationStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            self.errors.append(f"Failed to generate summary for document {item_id}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "cancelled": self.cancelled,
        }


@dataclass
class HealthReport:
    """Result of the configuration health check."""

    status: HealthStatus = HealthStatus.HEALTHY
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    checks: dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.status = HealthStatus.CRITICAL

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)
        if self.status is HealthStatus.HEALTHY:
            self.status = HealthStatus.WARNING

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "checks": dict(self.checks),
        }
