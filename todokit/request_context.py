from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Request-scoped data handed from the transport layer to services."""

    locale: str = "en"
    client_ip: str | None = None
    device_id: str | None = None

    def log_extra(self) -> dict[str, Any]:
        """Fields attached to log records emitted on behalf of this request"""
        return {
            "locale": self.locale,
            "client_ip": self.client_ip,
            "device_id": self.device_id,
        }
