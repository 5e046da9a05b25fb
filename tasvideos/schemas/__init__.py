"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Includes the publication representations and common reusable models such as
pagination and the standard error envelope.
"""

from .common import MessageResponse  # noqa: F401
