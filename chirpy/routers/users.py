from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from chirpy.routers.deps import current_user_id, get_user_service
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


class Credentials(BaseModel):
    email: str
    password: str


@router.post("", status_code=201)
def create_user(payload: Credentials, svc: UserService = Depends(get_user_service)):
    return svc.create_user(payload.email, payload.password).public()


@router.put("")
def update_user(payload: Credentials, request: Request, svc: UserService = Depends(get_user_service)):
    user_id = current_user_id(request)
    return svc.update_user(user_id, payload.email, payload.password).public()
