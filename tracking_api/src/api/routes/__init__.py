"""
API route modules for the manufacturing tracking service.

This package contains subrouters for:
- Production: production order create, fetch, close and list-open
- Quality: inspection submission/listing and the failure taxonomy

Routers are included from src.api.main (under the /api/v1 prefix).
"""
