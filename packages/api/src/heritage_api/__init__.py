"""
heritage_api — HTTP triggers for the unclaimed-land sync.

Start with:
    uvicorn heritage_api.app:app --port 8000

Endpoints:
    GET  /health
    GET  /ready
    GET  /api/cron/sync      (scheduler, CRON_SECRET bearer)
    POST /api/admin/sync     (ADMIN_API_KEY bearer)
    GET  /api/admin/sync     (ADMIN_API_KEY bearer)
"""

__version__ = "0.1.0"
