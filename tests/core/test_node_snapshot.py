"""Node Snapshot — tests for derived predicates and the attached replica set.

Tests cover:
    - major_version / is_smaller_major_version_than, including the no-early-exit scan
    - is_replica / is_replicating / is_sql_thread_caught_up
    - add_replica is an idempotent copy-on-insert
    - is_replica_of / is_master_of compare the source identity with snapshot keys
    - serialize_replicas / deserialize_replicas roundtrip and failure handling
"""

import json
import logging

from repltopo.core.errors import ReplicaSetDecodeError
from repltopo.core.log_position import LogPosition
from repltopo.core.node_identity import NodeIdentity
from repltopo.core.node_snapshot import NodeSnapshot


def _snapshot_with_version(version: str) -> NodeSnapshot:
    return NodeSnapshot(key=NodeIdentity("db1", 3306), version=version)


def _replica_of(host: str, port: int) -> NodeSnapshot:
    """Helper: snapshot replicating from host:port with a read position."""
    return NodeSnapshot(
        key=NodeIdentity("replica1", 3306),
        master_host=host,
        master_port=port,
        read_position=LogPosition("mysql-bin.000007", 1024),
        exec_position=LogPosition("mysql-bin.000007", 1024),
    )


# ─── Empty snapshot ──────────────────────────────────────────────

def test_new_snapshot_is_empty():
    snapshot = NodeSnapshot()
    assert snapshot.attached_replicas == set()
    assert snapshot.replica_identities == []
    assert not snapshot.is_replica
    assert not snapshot.key.is_valid()
    assert snapshot.binlog_format is None


def test_snapshots_do_not_share_replica_sets():
    first, second = NodeSnapshot(), NodeSnapshot()
    first.add_replica(NodeIdentity("r1", 3306))
    assert second.attached_replicas == set()


# ─── Major version ───────────────────────────────────────────────

def test_major_version_takes_first_two_components():
    assert _snapshot_with_version("5.6.2-log").major_version == ["5", "6"]


def test_major_version_pads_short_versions():
    assert _snapshot_with_version("8").major_version == ["8", "0"]
    assert _snapshot_with_version("").major_version == ["", "0"]


def test_smaller_major_version():
    assert _snapshot_with_version("5.1").is_smaller_major_version_than(
        _snapshot_with_version("5.6"),
    )


def test_larger_major_version_is_not_smaller():
    assert not _snapshot_with_version("5.6").is_smaller_major_version_than(
        _snapshot_with_version("5.1"),
    )


def test_equal_major_version_is_not_smaller():
    assert not _snapshot_with_version("5.6").is_smaller_major_version_than(
        _snapshot_with_version("5.6.40"),
    )


def test_major_version_ignores_patch_level():
    assert not _snapshot_with_version("5.6.1").is_smaller_major_version_than(
        _snapshot_with_version("5.6.30"),
    )


def test_major_version_scan_does_not_stop_at_larger_earlier_token():
    # 6 > 5 at the first position, but 1 < 6 at the second still counts
    assert _snapshot_with_version("6.1").is_smaller_major_version_than(
        _snapshot_with_version("5.6"),
    )


def test_non_numeric_version_tokens_count_as_zero():
    assert _snapshot_with_version("x.6").is_smaller_major_version_than(
        _snapshot_with_version("5.6"),
    )


def test_unicode_digit_tokens_count_as_zero():
    # str.isdigit() accepts these, int() does not
    assert _snapshot_with_version("5.²").is_smaller_major_version_than(
        _snapshot_with_version("5.6"),
    )
    assert not _snapshot_with_version("5.6").is_smaller_major_version_than(
        _snapshot_with_version("①.6"),
    )


# ─── Replication state ───────────────────────────────────────────

def test_not_a_replica_without_master_host():
    snapshot = _replica_of("", 3306)
    assert not snapshot.is_replica


def test_not_a_replica_without_read_position():
    snapshot = _replica_of("master1", 3306)
    snapshot.read_position = LogPosition()
    assert not snapshot.is_replica


def test_replica_with_master_host_and_read_position():
    assert _replica_of("master1", 3306).is_replica


def test_is_replicating_requires_both_threads():
    snapshot = _replica_of("master1", 3306)
    assert not snapshot.is_replicating
    snapshot.sql_thread_running = True
    assert not snapshot.is_replicating
    snapshot.io_thread_running = True
    assert snapshot.is_replicating


def test_is_replicating_requires_replica():
    snapshot = NodeSnapshot(sql_thread_running=True, io_thread_running=True)
    assert not snapshot.is_replicating


def test_sql_thread_caught_up():
    snapshot = _replica_of("master1", 3306)
    assert snapshot.is_sql_thread_caught_up
    snapshot.exec_position = LogPosition("mysql-bin.000007", 512)
    assert not snapshot.is_sql_thread_caught_up


# ─── Source / replica relations ──────────────────────────────────

def test_master_identity_is_built_from_master_fields():
    snapshot = _replica_of("master1", 3307)
    assert snapshot.master_identity == NodeIdentity("master1", 3307)


def test_is_replica_of_and_is_master_of():
    master = NodeSnapshot(key=NodeIdentity("master1", 3306))
    other = NodeSnapshot(key=NodeIdentity("master2", 3306))
    replica = _replica_of("master1", 3306)
    assert replica.is_replica_of(master)
    assert master.is_master_of(replica)
    assert not replica.is_replica_of(other)
    assert not other.is_master_of(replica)


def test_same_node_compares_keys_only():
    first = NodeSnapshot(key=NodeIdentity("db1", 3306), server_id=1)
    second = NodeSnapshot(key=NodeIdentity("db1", 3306), server_id=2)
    assert first.same_node_as(second)


# ─── Attached replicas ───────────────────────────────────────────

def test_add_replica_is_idempotent():
    snapshot = NodeSnapshot()
    snapshot.add_replica(NodeIdentity("r1", 3306))
    snapshot.add_replica(NodeIdentity("r1", 3306))
    snapshot.add_replica(NodeIdentity("r2", 3306))
    assert len(snapshot.replica_identities) == 2


def test_add_replica_stores_a_copy():
    snapshot = NodeSnapshot()
    key = NodeIdentity("r1", 3306)
    snapshot.add_replica(key)
    key.host = "renamed"
    assert snapshot.attached_replicas == {NodeIdentity("r1", 3306)}


def test_serialize_replicas_uses_wire_keys():
    snapshot = NodeSnapshot()
    snapshot.add_replica(NodeIdentity("r1", 3306))
    assert json.loads(snapshot.serialize_replicas()) == [
        {"Hostname": "r1", "Port": 3306},
    ]


def test_serialize_empty_replica_set():
    assert NodeSnapshot().serialize_replicas() == "[]"


def test_replica_set_roundtrip():
    original = NodeSnapshot()
    for host, port in (("r1", 3306), ("r2", 3306), ("r1", 3307)):
        original.add_replica(NodeIdentity(host, port))

    restored = NodeSnapshot()
    assert restored.deserialize_replicas(original.serialize_replicas()) is None
    assert restored.attached_replicas == original.attached_replicas


def test_deserialize_replaces_existing_set():
    snapshot = NodeSnapshot()
    snapshot.add_replica(NodeIdentity("stale", 3306))
    error = snapshot.deserialize_replicas('[{"Hostname": "fresh", "Port": 3306}]')
    assert error is None
    assert snapshot.attached_replicas == {NodeIdentity("fresh", 3306)}


def test_deserialize_failure_keeps_state_and_logs(caplog):
    snapshot = NodeSnapshot(key=NodeIdentity("db1", 3306))
    snapshot.add_replica(NodeIdentity("r1", 3306))
    with caplog.at_level(logging.WARNING, logger="repltopo.core.node_snapshot"):
        error = snapshot.deserialize_replicas("not json")
    assert isinstance(error, ReplicaSetDecodeError)
    assert error.context.node_key == "db1:3306"
    assert snapshot.attached_replicas == {NodeIdentity("r1", 3306)}
    assert "db1:3306" in caplog.text


def test_deserialize_rejects_wrong_item_shape():
    snapshot = NodeSnapshot()
    snapshot.add_replica(NodeIdentity("r1", 3306))
    error = snapshot.deserialize_replicas('[{"Hostname": "r2"}]')
    assert isinstance(error, ReplicaSetDecodeError)
    assert snapshot.attached_replicas == {NodeIdentity("r1", 3306)}
