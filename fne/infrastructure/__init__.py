"""Infrastructure Layer - network client and cross-cutting concerns.

Invariants:
    - All external calls wrapped with retry/timeout/error mapping
    - Infrastructure depends on core for errors and policy, never the reverse
"""
