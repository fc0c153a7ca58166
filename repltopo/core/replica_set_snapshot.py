"""Replica Set Snapshot — serialization / deserialization of attached replica identities.

Invariants:
    - replicas_to_snapshot produces JSON-safe dicts {"Hostname": str, "Port": int}
    - replicas_from_snapshot returns a NEW set; it never merges into an existing one
    - Any malformed input raises ReplicaSetDecodeError, nothing partial is returned
    - Only the SHAPE is checked: an empty Hostname or a non-positive Port decodes
      to an identity that fails is_valid(), exactly as it was stored

Design Decisions:
    - Extracted from node_snapshot.py: wire concerns stay out of the aggregate
    - Plain dicts + json, no schema library: core stays framework-free
    - Sets are emitted sorted by (host, port) so output is stable across runs;
      readers must still not rely on order
"""

import json
from collections.abc import Iterable

from repltopo.core.errors import ReplicaSetDecodeError
from repltopo.core.node_identity import NodeIdentity

HOST_KEY = "Hostname"
PORT_KEY = "Port"


def replicas_to_snapshot(identities: Iterable[NodeIdentity]) -> list[dict]:
    """Convert replica identities to wire dicts. Pure, no IO."""
    return [
        {HOST_KEY: key.host, PORT_KEY: key.port}
        for key in sorted(identities, key=lambda k: (k.host, k.port))
    ]


def _identity_from_item(index: int, item: object) -> NodeIdentity:
    if not isinstance(item, dict):
        raise ReplicaSetDecodeError(f"item {index} is not an object")
    host = item.get(HOST_KEY)
    port = item.get(PORT_KEY)
    if not isinstance(host, str):
        raise ReplicaSetDecodeError(f"item {index} has no string {HOST_KEY}")
    # bool is an int subclass; true/false are not ports
    if not isinstance(port, int) or isinstance(port, bool):
        raise ReplicaSetDecodeError(f"item {index} has no integer {PORT_KEY}")
    return NodeIdentity(host=host, port=port)


def replicas_from_snapshot(items: object) -> set[NodeIdentity]:
    """Rebuild a fresh identity set from decoded wire data. Pure, no IO.

    Unknown keys inside an item are ignored.
    """
    if not isinstance(items, list):
        raise ReplicaSetDecodeError("expected a JSON array")
    return {_identity_from_item(i, item) for i, item in enumerate(items)}


def replicas_to_json(identities: Iterable[NodeIdentity]) -> str:
    return json.dumps(replicas_to_snapshot(identities))


def replicas_from_json(text: str | bytes) -> set[NodeIdentity]:
    try:
        items = json.loads(text)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueError
        raise ReplicaSetDecodeError(f"invalid JSON: {e}") from e
    return replicas_from_snapshot(items)
