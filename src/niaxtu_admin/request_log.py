from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

SOURCE_BACKEND_API = "backend-api"


@dataclass(frozen=True)
class RequestLogEntry:
    timestamp: str
    method: str
    path: str
    status_code: int
    duration_ms: int
    client_ip: str | None = None
    user_agent: str | None = None
    environment: str = "development"
    entry_id: str | None = None

    @property
    def success(self) -> bool:
        return self.status_code < 400

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> RequestLogEntry:
        return cls(
            timestamp=str(data["timestamp"]),
            method=str(data["method"]).upper(),
            path=str(data["path"]),
            status_code=int(data["statusCode"]),
            duration_ms=int(data.get("durationMs") or 0),
            client_ip=data.get("ip"),
            user_agent=data.get("userAgent"),
            environment=str(data.get("environment") or "development"),
            entry_id=data.get("id"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "method": self.method,
            "path": self.path,
            "statusCode": self.status_code,
            "durationMs": self.duration_ms,
            "success": self.success,
            "ip": self.client_ip,
            "userAgent": self.user_agent,
            "environment": self.environment,
            "source": SOURCE_BACKEND_API,
        }


def should_persist(entry: RequestLogEntry, *, slow_request_ms: int, admin_path_prefix: str) -> bool:
    """Errors, slow requests and admin routes are kept in the ``logs`` collection."""
    return (
        entry.status_code >= 400
        or entry.duration_ms > slow_request_ms
        or entry.path.startswith(admin_path_prefix)
    )


class RequestLogRepository(Protocol):
    async def append(self, entry: RequestLogEntry) -> str:
        """Persist a request log entry and return its id."""

    async def list_recent(self, *, limit: int = 100, min_status: int | None = None) -> list[RequestLogEntry]:
        """List entries, newest first."""
