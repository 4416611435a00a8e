"""Domain models and entities.

Why here:
- Pure, strict data structures (Pydantic v2) live in this package.
- The domain knows nothing about HTTP, the CLI or HTML: only countries,
  locations and fetch outcomes.
"""
