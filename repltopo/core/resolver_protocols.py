"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Name resolution accessed through the HostResolver protocol
    - Implementations raise HostResolutionError on lookup failure, nothing else

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Synchronous contract: resolution is a blocking call with no timeout at this
      layer; callers needing a deadline wrap the resolver themselves
"""

from typing import Protocol


class HostResolver(Protocol):
    """Contract for canonical host name lookup — implemented by shell."""
    def resolve_canonical_name(self, host: str) -> str: ...
