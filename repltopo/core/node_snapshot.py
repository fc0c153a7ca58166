"""Node Snapshot — one node's polled replication state for one poll cycle.

Invariants:
    - is_replica iff master_host is non-empty AND read_position.file is non-empty
    - is_replicating additionally requires both SQL and IO threads running
    - attached_replicas is a set keyed by structural identity equality; it holds
      copies of identities, never references to other snapshots
    - deserialize_replicas REPLACES attached_replicas wholesale, and only on success

Design Decisions:
    - Dataclass with computed properties: pure, deterministic, testable without mocks
    - Created empty and filled field-by-field by the poller; discarded next cycle
    - No locking: one writer per snapshot, synchronization belongs to whoever
      aggregates snapshots into a shared registry
"""

import logging
from dataclasses import dataclass, field, replace

from repltopo.core.domain_types import BinlogFormat, ServerId
from repltopo.core.errors import ReplicaSetDecodeError
from repltopo.core.log_position import LogPosition
from repltopo.core.node_identity import NodeIdentity
from repltopo.core.replica_set_snapshot import replicas_from_json, replicas_to_json

logger = logging.getLogger(__name__)

# Version components compared by the major-version gate ("5.6" of "5.6.2-log")
MAJOR_VERSION_TOKENS: int = 2


def _version_token_value(token: str) -> int:
    """Tokens int() cannot read (letters, superscript digits) count as zero."""
    return int(token) if token.isdecimal() else 0


@dataclass
class NodeSnapshot:
    """Polled replication state of a single node — pure dataclass, no IO."""

    key: NodeIdentity = field(default_factory=lambda: NodeIdentity(host="", port=0))
    last_seen_valid: bool = False
    server_id: ServerId = ServerId(0)
    version: str = ""

    # Binary logging capabilities
    binlog_format: BinlogFormat | None = None
    log_bin_enabled: bool = False
    log_slave_updates_enabled: bool = False
    self_position: LogPosition = field(default_factory=LogPosition)

    # Replication from this node's own source
    master_host: str = ""
    master_port: int = 0
    sql_thread_running: bool = False
    io_thread_running: bool = False
    read_position: LogPosition = field(default_factory=LogPosition)
    exec_position: LogPosition = field(default_factory=LogPosition)
    seconds_behind_master: int = 0

    # Identities of replicas currently attached to this node
    attached_replicas: set[NodeIdentity] = field(default_factory=set)

    # Poller bookkeeping: set once every field above was refreshed this cycle
    is_up_to_date: bool = False

    @property
    def major_version(self) -> list[str]:
        """First two dot-separated version components, "0"-padded when missing."""
        tokens = self.version.split(".")[:MAJOR_VERSION_TOKENS]
        return tokens + ["0"] * (MAJOR_VERSION_TOKENS - len(tokens))

    def is_smaller_major_version_than(self, other: "NodeSnapshot") -> bool:
        """True as soon as ANY position holds a strictly smaller token.

        The scan does not stop at an earlier, larger token: "6.1" against "5.6"
        is True because 1 < 6 at the second position.
        """
        theirs = other.major_version
        for i, token in enumerate(self.major_version):
            if _version_token_value(token) < _version_token_value(theirs[i]):
                return True
        return False

    @property
    def is_replica(self) -> bool:
        return self.master_host != "" and self.read_position.file != ""

    @property
    def is_replicating(self) -> bool:
        return self.is_replica and self.sql_thread_running and self.io_thread_running

    @property
    def is_sql_thread_caught_up(self) -> bool:
        return self.read_position == self.exec_position

    @property
    def master_identity(self) -> NodeIdentity:
        """Fresh, non-canonicalized identity of this node's source."""
        return NodeIdentity(host=self.master_host, port=self.master_port)

    @property
    def replica_identities(self) -> list[NodeIdentity]:
        """Attached replicas; order is unspecified."""
        return list(self.attached_replicas)

    def same_node_as(self, other: "NodeSnapshot") -> bool:
        return self.key == other.key

    def add_replica(self, replica_key: NodeIdentity) -> None:
        """Idempotent insert of a copy of replica_key."""
        self.attached_replicas.add(replace(replica_key))

    def serialize_replicas(self) -> str:
        return replicas_to_json(self.attached_replicas)

    def deserialize_replicas(self, text: str | bytes) -> ReplicaSetDecodeError | None:
        """Replace attached_replicas from the wire array.

        On failure the error is logged and returned; the current set is kept.
        """
        try:
            replicas = replicas_from_json(text)
        except ReplicaSetDecodeError as e:
            e.context.node_key = str(self.key)
            logger.warning(
                f"Ignoring replica set for {self.key}: {e.message}",
                extra={"node_key": str(self.key), "error_code": e.code},
            )
            return e
        self.attached_replicas = replicas
        return None

    def is_replica_of(self, master: "NodeSnapshot") -> bool:
        return self.master_identity == master.key

    def is_master_of(self, replica: "NodeSnapshot") -> bool:
        return replica.is_replica_of(self)
