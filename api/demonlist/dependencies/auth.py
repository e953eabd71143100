"""Caller identification from the X-API-Key header."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from ..config import settings
from ..errors import MissingPermissions
from ..services.records.policy import Privilege

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass(frozen=True)
class Caller:
    privilege: Privilege
    ip: str

    @property
    def is_helper(self) -> bool:
        return self.privilege >= Privilege.HELPER

    @property
    def is_moderator(self) -> bool:
        return self.privilege >= Privilege.MODERATOR


def _matches(candidate: str, configured: str | None) -> bool:
    return bool(configured) and secrets.compare_digest(candidate, configured)


async def get_caller(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> Caller:
    """Map the request's API key to a privilege level.

    No key means a public caller. A key that matches neither configured key
    is rejected with 401 rather than silently downgraded.
    """
    client_ip = request.client.host if request.client else "unknown"

    if not api_key:
        return Caller(Privilege.PUBLIC, client_ip)

    if not settings.api_key and not settings.helper_api_key:
        logger.warning(
            "API key presented but none configured - treating as public",
            extra={"client_ip": client_ip, "path": request.url.path},
        )
        return Caller(Privilege.PUBLIC, client_ip)

    # Constant-time comparison against both keys
    if _matches(api_key, settings.api_key):
        return Caller(Privilege.MODERATOR, client_ip)
    if _matches(api_key, settings.helper_api_key):
        return Caller(Privilege.HELPER, client_ip)

    logger.warning(
        "Invalid API key attempt",
        extra={"client_ip": client_ip, "path": request.url.path},
    )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def require_helper(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_helper:
        raise MissingPermissions("list helper")
    return caller


async def require_moderator(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_moderator:
        raise MissingPermissions("list moderator")
    return caller
