# Routes package init
"""
SubsAPI: API Routes Package
=============================

Route Inventory:
    - subscriptions.py:  /api/v1/subscriptions CRUD + /summary
    - health.py:         GET /health

Routes stay thin: they read the request, call a service, and set headers.
Business rules live in services/.
"""
