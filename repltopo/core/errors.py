"""Error Hierarchy — typed, categorized errors for replication topology failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Core returns these as values (parse, canonicalize, decode); only the API shell raises them
    - to_response() produces the REST envelope used by the global handlers

Design Decisions:
    - Single hierarchy with TopologyError base: FastAPI global handler catches all
    - Pairing rejections are NOT errors here: they are expected, frequent outcomes
      and travel as plain dicts from enforce_replication
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    EXTERNAL_LOOKUP = "external_lookup"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    node_key: str | None = None
    debug_info: dict[str, Any] | None = None


class TopologyError(Exception):
    """Base exception for all replication topology errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "node_key": self.context.node_key,
                },
            }
        }


# ─── Validation Errors (400-level) ──────────────────────────────

class InvalidNodeIdentityError(TopologyError):
    """A host:port string did not parse into a valid identity."""
    def __init__(self, raw: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.node_key = ctx.node_key or raw
        super().__init__(
            f"Invalid node identity '{raw}': expected host:port with a positive port",
            "INVALID_NODE_IDENTITY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.raw = raw


class ReplicaSetDecodeError(TopologyError):
    """Serialized replica set is not a JSON array of {Hostname, Port} objects."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot decode replica set: {message}",
            "REPLICA_SET_DECODE_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Lookup Errors (500-level) ──────────────────────────────────

class HostResolutionError(TopologyError):
    """Canonical name lookup for a host failed."""
    def __init__(self, host: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.node_key = ctx.node_key or host
        super().__init__(
            f"Name resolution failed for '{host}': {message}",
            "HOST_RESOLUTION_FAILED", ErrorCategory.EXTERNAL_LOOKUP,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.host = host
