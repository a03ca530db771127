"""Result objects and diagnostic types for xmlflat conversions.

This module defines the diagnostic entries and performance metrics attached to
every conversion result returned by the never-fail API layer.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position is not None:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single conversion."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_built: int = 0
    rows_produced: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms
