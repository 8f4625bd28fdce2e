"""Caller identity for API routes

Authentication is done by the platform gateway, which forwards the
authenticated user id in X-User-Id. The retention sweep is called by the
scheduler with a shared service token instead.
"""

import hmac
from typing import Optional
from fastapi import Depends, Header
from libs.result import Error
from src.api.error import ClientError
from src.depends import get_config


async def get_current_actor(x_user_id: Optional[str] = Header(default=None)) -> str:
    if not x_user_id:
        raise ClientError(
            Error(
                code="UNAUTHENTICATED",
                message="Authentication required",
                reason="Missing X-User-Id header",
            )
        )
    return x_user_id


async def require_service_token(
    x_service_token: Optional[str] = Header(default=None),
    config=Depends(get_config),
) -> None:
    expected = config.RETENTION_SERVICE_TOKEN or ""
    if not expected or not x_service_token or not hmac.compare_digest(x_service_token.encode(), expected.encode()):
        raise ClientError(
            Error(
                code="UNAUTHENTICATED",
                message="Trusted caller credential required",
                reason="Missing or invalid X-Service-Token",
            )
        )
