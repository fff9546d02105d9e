from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter(tags=["admin"])


def _hits(request: Request):
    counter = getattr(getattr(request.app, "state", None), "hits", None)
    if counter is None:
        raise RuntimeError("hits is not configured")
    return counter


@router.get("/api/healthz", response_class=PlainTextResponse)
def healthz():
    return "OK"


@router.get("/api/metrics", response_class=PlainTextResponse)
def metrics(request: Request):
    return f"Hits: {_hits(request).value}"


@router.post("/api/reset", response_class=PlainTextResponse)
def reset_metrics(request: Request):
    _hits(request).reset()
    return "Hits reset to 0"


@router.get("/admin/metrics", response_class=HTMLResponse)
def admin_metrics(request: Request):
    return f"""<html>

<body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {_hits(request).value} times!</p>
</body>

</html>"""
