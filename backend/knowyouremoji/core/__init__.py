"""Core Layer: pure domain logic, no network, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Functions are deterministic given their inputs (id/timestamp generation
      and the quota tracker's injected storage are the only exceptions)

Design Decisions:
    - Functional core separated from imperative shell
"""
