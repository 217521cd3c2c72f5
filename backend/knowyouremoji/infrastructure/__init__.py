"""Infrastructure Layer: external service clients, file IO and cross-cutting concerns.

Invariants:
    - External calls wrapped with retry/timeout/error mapping
    - Optional collaborators (Redis, usage file) degrade to no-ops when absent

Design Decisions:
    - Resilient wrappers over raw clients
"""
