"""Health check result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class HealthResult:
    """Outcome of a single health check. Unhealthy is a value, not an error."""

    ok: bool
    message: str = ""
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def healthy(cls, message: str = "") -> HealthResult:
        return cls(ok=True, message=message)

    @classmethod
    def unhealthy(cls, message: str) -> HealthResult:
        return cls(ok=False, message=message)

    def to_doc(self) -> dict:
        """Serialize for status output."""
        return {
            "ok": self.ok,
            "message": self.message,
            "checked_at": self.checked_at.isoformat(),
        }
