"""Core Layer — pure domain logic, no IO, no async, no framework.

Invariants:
    - core/ depends on the standard library only: no pydantic, no fastapi, and no
      imports from api/, schemas/ or infrastructure/ (schemas/ imports core, never the reverse)
    - Name resolution reaches core only through the HostResolver protocol
    - Every predicate is deterministic over the snapshots it is given

Design Decisions:
    - Functional core separated from imperative shell: the poller and the API
      build snapshots, core only decides
"""
