"""Topology API Schemas — request/response models for the topology routes.

Invariants:
    - CompatibilityResponse.reason and error_code are both set iff allowed is False
    - IdentityParseRequest.host_port is stripped before parsing
"""

from pydantic import BaseModel, Field, field_validator

from repltopo.schemas.node_snapshot import LogPositionPayload, NodeIdentityPayload, NodeSnapshotPayload


class CompatibilityRequest(BaseModel):
    """Candidate pairing: may `replica` replicate from `source`?"""
    replica: NodeSnapshotPayload
    source: NodeSnapshotPayload


class CompatibilityResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    error_code: str | None = None


class IdentityParseRequest(BaseModel):
    host_port: str = Field(min_length=1, max_length=300)
    canonicalize: bool | None = None

    @field_validator("host_port")
    @classmethod
    def strip_host_port(cls, v: str) -> str:
        return v.strip()


class IdentityParseResponse(BaseModel):
    key: NodeIdentityPayload
    canonicalized: bool
    resolution_error: str | None = None


class PositionCompareRequest(BaseModel):
    left: LogPositionPayload
    right: LogPositionPayload


class PositionCompareResponse(BaseModel):
    """ordering is -1, 0 or 1 for left <, ==, > right."""
    ordering: int
    left_is_smaller: bool
    equal: bool
