"""
API route modules.

This package contains subrouters for:
- Publications: read access to the publication catalog

Routers are included from tasvideos.api.main (under the /api/v1 prefix).
"""
