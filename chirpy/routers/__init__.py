"""
FastAPI routers grouped by domain (chirps, users, auth, webhooks, admin).

Each module exposes an APIRouter included by ``chirpy.app.create_app``.
Routers only translate HTTP to service calls; failures propagate as
ChirpyError and are mapped to status codes by the app's exception handler.
"""
