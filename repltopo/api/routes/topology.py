"""Topology Routes — pairing decisions, identity parsing and log position ordering.

Invariants:
    - POST /compatibility always answers 200; a rejection is a normal outcome
    - POST /identities/parse answers 400 for malformed host:port, and 200 with
      resolution_error set when canonicalization fails (raw host is returned)
    - POST /positions/compare is a pure ordering query

Design Decisions:
    - Resolver injected through get_host_resolver so tests override it without DNS
    - Resolution runs in the threadpool (sync def route): it blocks on the OS resolver
"""

import logging

from fastapi import APIRouter, Depends

from repltopo.config import Settings, get_settings
from repltopo.core.enforce_replication import validate_replication_pairing
from repltopo.core.errors import InvalidNodeIdentityError
from repltopo.core.node_identity import parse_node_identity
from repltopo.core.resolver_protocols import HostResolver
from repltopo.infrastructure.name_resolution import SocketHostResolver
from repltopo.schemas.topology import (
    CompatibilityRequest, CompatibilityResponse,
    IdentityParseRequest, IdentityParseResponse,
    PositionCompareRequest, PositionCompareResponse,
)
from repltopo.schemas.node_snapshot import NodeIdentityPayload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/topology", tags=["topology"])


def get_host_resolver() -> HostResolver:
    return SocketHostResolver()


@router.post("/compatibility", response_model=CompatibilityResponse)
async def check_compatibility(body: CompatibilityRequest):
    """Decide whether body.replica may replicate from body.source."""
    replica = body.replica.to_domain()
    source = body.source.to_domain()
    rejection = validate_replication_pairing(replica, source)
    if rejection is None:
        return CompatibilityResponse(allowed=True)

    logger.info(
        f"Pairing rejected: {rejection['message']}",
        extra={
            "node_key": str(replica.key),
            "source_key": str(source.key),
            "error_code": rejection["error_code"],
        },
    )
    return CompatibilityResponse(
        allowed=False,
        reason=rejection["message"],
        error_code=rejection["error_code"],
    )


@router.post("/identities/parse", response_model=IdentityParseResponse)
def parse_identity(
    body: IdentityParseRequest,
    resolver: HostResolver = Depends(get_host_resolver),
    settings: Settings = Depends(get_settings),
):
    """Parse host:port, optionally canonicalizing the host."""
    key = parse_node_identity(body.host_port)
    if key is None:
        raise InvalidNodeIdentityError(body.host_port)

    canonicalize = body.canonicalize
    if canonicalize is None:
        canonicalize = settings.canonicalize_identities
    if not canonicalize:
        return IdentityParseResponse(
            key=NodeIdentityPayload.from_domain(key), canonicalized=False,
        )

    key, error = key.canonicalize(resolver)
    return IdentityParseResponse(
        key=NodeIdentityPayload.from_domain(key),
        canonicalized=error is None,
        resolution_error=error.message if error else None,
    )


@router.post("/positions/compare", response_model=PositionCompareResponse)
async def compare_positions(body: PositionCompareRequest):
    """Order two binary log positions."""
    left = body.left.to_domain()
    right = body.right.to_domain()
    return PositionCompareResponse(
        ordering=(left > right) - (left < right),
        left_is_smaller=left.is_smaller_than(right),
        equal=left == right,
    )
