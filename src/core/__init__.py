"""Core: domain, interfaces, services and configuration. No I/O libraries here."""
