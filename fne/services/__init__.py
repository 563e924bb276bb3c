"""Services Layer - validate, serialize and submit documents through the HTTP pipeline.

Invariants:
    - Validation always happens before the first network attempt
    - Services share the client's ResilientHttpClient; they hold no other state
"""
