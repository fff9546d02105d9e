from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from chirpy.routers.deps import current_user_id, get_chirp_service
from chirpy.services.chirp_service import ChirpService

router = APIRouter(prefix="/api/chirps", tags=["chirps"])


class ChirpIn(BaseModel):
    body: str


@router.post("", status_code=201)
def create_chirp(payload: ChirpIn, request: Request, svc: ChirpService = Depends(get_chirp_service)):
    user_id = current_user_id(request)
    return svc.create_chirp(user_id, payload.body).to_dict()


@router.get("")
def list_chirps(
    author_id: Optional[int] = None,
    sort: str = "asc",
    svc: ChirpService = Depends(get_chirp_service),
):
    return [chirp.to_dict() for chirp in svc.list_chirps(author_id=author_id, sort=sort)]


@router.get("/{chirp_id}")
def get_chirp(chirp_id: int, svc: ChirpService = Depends(get_chirp_service)):
    return svc.get_chirp(chirp_id).to_dict()


@router.delete("/{chirp_id}", status_code=204)
def delete_chirp(chirp_id: int, request: Request, svc: ChirpService = Depends(get_chirp_service)):
    svc.delete_chirp(chirp_id, current_user_id(request))
    return Response(status_code=204)
