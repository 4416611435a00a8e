"""Core interfaces/abstractions.

Why:
- Defines the contracts (Protocol) implemented by concrete adapters.
- Inverts dependencies: the core depends on abstractions only.
"""
