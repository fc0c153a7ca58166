"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ServerId is a non-negative integer, unique per node within a cluster
    - LogOffset is a 64-bit byte offset inside a binary log file
    - Binlog formats encoded as an Enum — no raw string matching in rules

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

ServerId = NewType("ServerId", int)
LogOffset = NewType("LogOffset", int)       # 0 – 2**63-1


# ─── Enums ───────────────────────────────────────────────────────

class BinlogFormat(str, Enum):
    """Encoding of logged write events, as reported by the server."""
    STATEMENT = "STATEMENT"
    ROW = "ROW"
    MIXED = "MIXED"

    @classmethod
    def parse(cls, value: str) -> "BinlogFormat":
        """Case-insensitive lookup of a server-reported format string."""
        return cls(value.strip().upper())


class PairingRule(str, Enum):
    """Replication pairing rules, in evaluation order. Values are error codes."""
    SOURCE_BINARY_LOGGING = "SOURCE_BINARY_LOGGING_DISABLED"
    SOURCE_LOG_REPLICA_UPDATES = "SOURCE_LOG_REPLICA_UPDATES_DISABLED"
    MAJOR_VERSION = "REPLICA_MAJOR_VERSION_LOWER"
    BINLOG_FORMAT = "BINLOG_FORMAT_DOWNGRADE"
    SERVER_ID = "IDENTICAL_SERVER_ID"
