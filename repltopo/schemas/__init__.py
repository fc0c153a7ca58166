"""Pydantic Schemas — validation of data crossing the system boundary.

Invariants:
    - Schemas validate at system boundary (API bodies, serialized replica sets)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from core dataclasses: schemas are wire contracts, core types are the model
"""
