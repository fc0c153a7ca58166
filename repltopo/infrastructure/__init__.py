"""Infrastructure Layer — external lookups and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors.py
    - OS-level failures are mapped to TopologyError subclasses before leaving this layer
"""
