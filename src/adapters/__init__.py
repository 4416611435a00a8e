"""Adapters: HTTP clients for the external APIs, HTML and JSON output."""
