from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from messagely.services.identity_service import IdentityService, InvalidCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginPayload(BaseModel):
    username: str
    password: str


class RegisterPayload(BaseModel):
    username: str
    password: str
    first_name: str
    last_name: str
    phone: str


def _identity(request: Request) -> IdentityService:
    svc = getattr(getattr(request.app, "state", None), "identity_service", None)
    if not svc:
        raise RuntimeError("IdentityService not configured")
    return svc


@router.post("/login")
def login(payload: LoginPayload, request: Request):
    """{username, password} => {token}"""
    try:
        token = _identity(request).login(payload.username, payload.password)
    except InvalidCredentialsError:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid user/password")
    return {"token": token}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, request: Request):
    """{username, password, first_name, last_name, phone} => {token}

    Registers the user and logs them in.
    """
    token = _identity(request).register_and_login(
        payload.username,
        payload.password,
        payload.first_name,
        payload.last_name,
        payload.phone,
    )
    return {"token": token}
