"""Pydantic Schemas: request/response validation for API boundaries.

Invariants:
    - Schemas validate at the system boundary (user input, model replies, API output)
    - Domain enums from core/ used for enumerated fields
"""
