from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from messagely.services.identity_service import IdentityService
from messagely.services.message_service import MessageDirectory
from messagely.services.profile_resolver import ProfileResolver
from messagely.services.session_service import current_username, ensure_correct_user

router = APIRouter(prefix="/users", tags=["users"])


def _state_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if not svc:
        raise RuntimeError(f"{name} not configured")
    return svc


def _identity(request: Request) -> IdentityService:
    return _state_service(request, "identity_service")


def _directory(request: Request) -> MessageDirectory:
    return _state_service(request, "message_directory")


def _resolver(request: Request) -> ProfileResolver:
    return _state_service(request, "profile_resolver")


@router.get("")
def list_users(request: Request, _caller: str = Depends(current_username)):
    """=> {users: [{username, first_name, last_name}, ...]}"""
    users = _identity(request).list_all()
    return {"users": [u.to_dict() for u in users]}


@router.get("/{username}")
def user_detail(username: str, request: Request, _caller: str = Depends(ensure_correct_user)):
    """=> {user: {username, first_name, last_name, phone, joined_at, last_login_at}}"""
    profile = _identity(request).get_profile(username)
    return {"user": profile.to_dict()}


@router.get("/{username}/to")
def messages_to(username: str, request: Request, _caller: str = Depends(ensure_correct_user)):
    """=> {messages: [{id, body, sent_at, read_at, from_user: {username, first_name, last_name, phone}}, ...]}"""
    messages = _directory(request).messages_to(username)
    resolved = _resolver(request).resolve_incoming(messages, username)
    return {"messages": [m.to_dict() for m in resolved]}


@router.get("/{username}/from")
def messages_from(username: str, request: Request, _caller: str = Depends(ensure_correct_user)):
    """=> {messages: [{id, body, sent_at, read_at, to_user: {username, first_name, last_name, phone}}, ...]}"""
    messages = _directory(request).messages_from(username)
    resolved = _resolver(request).resolve_outgoing(messages, username)
    return {"messages": [m.to_dict() for m in resolved]}
