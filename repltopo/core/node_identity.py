"""Node Identity — (host, port) address of a database node.

Invariants:
    - Valid iff host is non-empty and port > 0
    - Equality and hash are structural over (host, port)
    - Parsing splits on the FIRST colon only; malformed input yields None, never raises
    - canonicalize() mutates host in place and always returns the identity for chaining

Design Decisions:
    - Plain mutable dataclass with a structural hash: identities are used as set
      members, so sets hold copies (see NodeSnapshot.add_replica) and an identity
      is canonicalized before it is stored, never after
    - Host literals containing colons (raw IPv6) are not supported by the split rule
"""

import re
from dataclasses import dataclass

from repltopo.core.errors import HostResolutionError
from repltopo.core.resolver_protocols import HostResolver

_PORT_PATTERN = re.compile(r"[0-9]+")

# Resolvers may return fully-qualified names ("db1.example.com.")
_NAME_SEPARATOR = "."


@dataclass(unsafe_hash=True)
class NodeIdentity:
    """Address of one database node."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"

    def is_valid(self) -> bool:
        return len(self.host) > 0 and self.port > 0

    def canonicalize(
        self, resolver: HostResolver,
    ) -> tuple["NodeIdentity", HostResolutionError | None]:
        """Rewrite host to its canonical name.

        On lookup failure the host is left untouched and the error is returned
        next to the identity; the caller decides whether the raw host is usable.
        """
        try:
            resolved = resolver.resolve_canonical_name(self.host)
        except HostResolutionError as e:
            return self, e
        if resolved.endswith(_NAME_SEPARATOR):
            resolved = resolved[:-1]
        self.host = resolved
        return self, None


def parse_node_identity(host_port: str) -> NodeIdentity | None:
    """Parse "host:port". Returns None unless both parts are present and port > 0."""
    host, separator, port_text = host_port.partition(":")
    if not separator or not host:
        return None
    if not _PORT_PATTERN.fullmatch(port_text):
        return None
    port = int(port_text)
    if port <= 0:
        return None
    return NodeIdentity(host=host, port=port)
