"""API Layer — FastAPI routes, status mapping and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every non-2xx response body is {"error": "<message>"}

Design Decisions:
    - Thin routes: validate in core/, persist through services/, map status here
"""
