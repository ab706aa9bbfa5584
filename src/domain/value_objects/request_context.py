"""Request context value object.

Immutable snapshot of the inbound request that session operations and audit
events need. Built by the presentation layer, so the application layer never
touches framework request objects.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Observed attributes of the request driving a session operation.

    Attributes:
        ip_address: Client IP as seen by the server (None when unknown).
        user_agent: User-Agent header value.
        path: Request path.
        method: HTTP method.
        trace_id: Correlation id for logs.
    """

    ip_address: str | None = None
    user_agent: str | None = None
    path: str | None = None
    method: str | None = None
    trace_id: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to a JSON-compatible dict for audit details."""
        return {
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "path": self.path,
            "method": self.method,
            "trace_id": self.trace_id,
        }
