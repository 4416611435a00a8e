"""Application services (orchestration of adapters through core interfaces)."""
