from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from app.core.config import get_settings
from app.services.internal_auth import InternalAccessPolicy

logger = structlog.get_logger(__name__)


def _forbidden(reason: str, *, client_ip: str | None, request: Request) -> HTTPException:
    logger.warning(
        "internal_api_auth_failed",
        reason=reason,
        client_ip=client_ip,
        path=request.url.path,
    )
    return HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


def assert_internal_access(request: Request) -> None:
    settings = get_settings()
    policy = InternalAccessPolicy(
        token=settings.internal_api_token,
        allowlist=settings.internal_api_allowlist,
        trusted_proxies=settings.internal_api_trusted_proxies,
    )
    client_ip = policy.client_ip(request)

    if not policy.allows_ip(client_ip):
        raise _forbidden("ip_not_allowed", client_ip=client_ip, request=request)
    if not policy.has_valid_token(request):
        raise _forbidden("invalid_credentials", client_ip=client_ip, request=request)
