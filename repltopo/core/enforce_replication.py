"""Replication Pairing Enforcement — decides whether a replica may replicate from a source.

Invariants:
    - All functions are PURE: no IO, no async, no side effects beyond a debug log
    - Each check returns a rejection dict on violation, None on success
    - validate_replication_pairing chains all checks in fixed order — first rejection wins:
        1. source has binary logging
        2. source logs updates received from its own source
        3. replica's major version is not lower than the source's
        4. binlog format is safe to re-log (only when the replica itself chains)
        5. server ids differ
    - Rejection messages embed both identities and are shown to operators verbatim

Design Decisions:
    - Return dicts (not exceptions): rejections are expected and frequent, so the
      rejection path has the same shape as a tool/API response
    - Rule codes come from PairingRule: single source of truth for callers that branch
"""

import logging

from repltopo.core.domain_types import BinlogFormat, PairingRule
from repltopo.core.node_snapshot import NodeSnapshot

logger = logging.getLogger(__name__)

# Source formats a chaining replica cannot faithfully re-log, per replica format.
# A ROW replica accepts anything; absent entries impose no restriction.
_UNSAFE_SOURCE_FORMATS: dict[BinlogFormat, frozenset[BinlogFormat]] = {
    BinlogFormat.STATEMENT: frozenset({BinlogFormat.ROW, BinlogFormat.MIXED}),
    BinlogFormat.MIXED: frozenset({BinlogFormat.ROW}),
}


def _rejection(rule: PairingRule, message: str) -> dict:
    return {"status": "rejected", "error_code": rule.value, "message": message}


def check_source_binary_logging(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Rule 1: the source must write a binary log."""
    if not source.log_bin_enabled:
        return _rejection(
            PairingRule.SOURCE_BINARY_LOGGING,
            f"{source.key} does not have binary logging enabled; "
            f"{replica.key} cannot replicate from it",
        )
    return None


def check_source_log_slave_updates(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Rule 2: the source must propagate events received from its own source."""
    if not source.log_slave_updates_enabled:
        return _rejection(
            PairingRule.SOURCE_LOG_REPLICA_UPDATES,
            f"{source.key} does not have log_slave_updates enabled; "
            f"it does not propagate logs from its own source to {replica.key}",
        )
    return None


def check_major_version(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Rule 3: a replica must not run an older major version than its source."""
    if replica.is_smaller_major_version_than(source):
        return _rejection(
            PairingRule.MAJOR_VERSION,
            f"{replica.key} has version {replica.version}, which is lower than "
            f"{source.version} on {source.key}",
        )
    return None


def check_binlog_format(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Rule 4: a chaining replica must be able to re-log what the source sends.

    Replicas without both log_bin and log_slave_updates do not re-log and are exempt.
    """
    if not (replica.log_bin_enabled and replica.log_slave_updates_enabled):
        return None
    unsafe = _UNSAFE_SOURCE_FORMATS.get(replica.binlog_format, frozenset())
    if source.binlog_format in unsafe:
        return _rejection(
            PairingRule.BINLOG_FORMAT,
            f"Cannot replicate from {source.binlog_format.value} binlog format on "
            f"{source.key} to {replica.binlog_format.value} on {replica.key}",
        )
    return None


def check_server_id(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Rule 5: identical server ids would make a node skip its source's events."""
    if replica.server_id == source.server_id:
        return _rejection(
            PairingRule.SERVER_ID,
            f"Identical server id: {source.key}, {replica.key} both have "
            f"{replica.server_id}",
        )
    return None


def validate_replication_pairing(replica: NodeSnapshot, source: NodeSnapshot) -> dict | None:
    """Chain all pairing checks. Returns first rejection or None."""
    return (
        check_source_binary_logging(replica, source)
        or check_source_log_slave_updates(replica, source)
        or check_major_version(replica, source)
        or check_binlog_format(replica, source)
        or check_server_id(replica, source)
    )


def can_replicate_from(replica: NodeSnapshot, source: NodeSnapshot) -> tuple[bool, str | None]:
    """Decide whether replica may replicate from source. Returns (allowed, reason)."""
    rejection = validate_replication_pairing(replica, source)
    if rejection is None:
        return True, None
    logger.debug(
        rejection["message"],
        extra={
            "node_key": str(replica.key),
            "source_key": str(source.key),
            "error_code": rejection["error_code"],
        },
    )
    return False, rejection["message"]
