"""Services Layer: request normalization and the interpretation pipeline.

Invariants:
    - Validation completes before any client or network object is touched
    - Services depend on Protocols, never on concrete infrastructure classes
"""
