"""
High-level use cases for the Chirpy API.

Each service orchestrates the JSON store to implement business rules
(create chirp, login, refresh tokens, upgrade users).

Routers (FastAPI endpoints) call these services instead of loading or
saving the dataset directly.
"""
