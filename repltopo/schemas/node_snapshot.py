"""Node Snapshot Schemas — API representation of a polled node and its parts.

Invariants:
    - Ports are positive, offsets and server ids non-negative
    - binlog_format accepts any letter case and normalizes to BinlogFormat
    - to_domain() builds fresh core objects; payloads never alias core state
"""

from pydantic import BaseModel, Field, field_validator

from repltopo.core.domain_types import BinlogFormat, LogOffset, ServerId
from repltopo.core.log_position import LogPosition
from repltopo.core.node_identity import NodeIdentity
from repltopo.core.node_snapshot import NodeSnapshot


class NodeIdentityPayload(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(gt=0)

    def to_domain(self) -> NodeIdentity:
        return NodeIdentity(host=self.host, port=self.port)

    @classmethod
    def from_domain(cls, key: NodeIdentity) -> "NodeIdentityPayload":
        return cls(host=key.host, port=key.port)


class LogPositionPayload(BaseModel):
    file: str = ""
    offset: int = Field(0, ge=0, lt=2**63)

    def to_domain(self) -> LogPosition:
        return LogPosition(file=self.file, offset=LogOffset(self.offset))


class NodeSnapshotPayload(BaseModel):
    """One node's replication state as submitted by a poller."""
    key: NodeIdentityPayload
    last_seen_valid: bool = False
    server_id: int = Field(ge=0)
    version: str = ""
    binlog_format: BinlogFormat | None = None
    log_bin_enabled: bool = False
    log_slave_updates_enabled: bool = False
    self_position: LogPositionPayload = Field(default_factory=LogPositionPayload)
    master_host: str = ""
    master_port: int = Field(0, ge=0)
    sql_thread_running: bool = False
    io_thread_running: bool = False
    read_position: LogPositionPayload = Field(default_factory=LogPositionPayload)
    exec_position: LogPositionPayload = Field(default_factory=LogPositionPayload)
    seconds_behind_master: int = 0
    attached_replicas: list[NodeIdentityPayload] = Field(default_factory=list)

    @field_validator("binlog_format", mode="before")
    @classmethod
    def normalize_binlog_format(cls, v: object) -> object:
        if isinstance(v, str):
            return BinlogFormat.parse(v) if v.strip() else None
        return v

    def to_domain(self) -> NodeSnapshot:
        snapshot = NodeSnapshot(
            key=self.key.to_domain(),
            last_seen_valid=self.last_seen_valid,
            server_id=ServerId(self.server_id),
            version=self.version,
            binlog_format=self.binlog_format,
            log_bin_enabled=self.log_bin_enabled,
            log_slave_updates_enabled=self.log_slave_updates_enabled,
            self_position=self.self_position.to_domain(),
            master_host=self.master_host,
            master_port=self.master_port,
            sql_thread_running=self.sql_thread_running,
            io_thread_running=self.io_thread_running,
            read_position=self.read_position.to_domain(),
            exec_position=self.exec_position.to_domain(),
            seconds_behind_master=self.seconds_behind_master,
        )
        for replica in self.attached_replicas:
            snapshot.add_replica(replica.to_domain())
        return snapshot
