"""
Core utilities shared across the Chirpy backend.

This package hosts:
- configuration helpers (env vars, storage path, token lifetimes)
- cross-cutting services such as logging, password hashing, signed tokens
  and the typed error taxonomy used by services and routers.

Services and repositories depend on these primitives instead of reading
os.environ or talking to FastAPI directly.
"""
