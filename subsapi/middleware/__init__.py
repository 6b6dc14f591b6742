# Middleware package init
"""
SubsAPI: Middleware Package
=============================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate (or accept) the correlation ID
    2. Logging: Log method, path, status and duration with that ID
    3. CORS: Applied by FastAPI's CORSMiddleware

    Responses pass back through in reverse order, so the request ID header
    is present on every response including errors.
"""
