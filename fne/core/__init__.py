"""Core Layer - pure domain logic for FNE invoices, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, infrastructure/ or client
    - Time is read only through an injected Clock
"""
