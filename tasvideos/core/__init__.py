"""
Core application utilities for settings, logging, caching and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request correlation ids
- Cache services used by the service layer
- Dependency helpers (request-scoped services)
"""
