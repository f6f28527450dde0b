# coding: utf-8

"""Bearer-token guard for publish access."""

from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from registry_api.config import RegistrySettings, get_settings

bearer_auth = HTTPBearer(auto_error=False)


def require_publish_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_auth),
    settings: RegistrySettings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the configured publish token."""

    if not settings.publish_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Publishing is disabled on this registry instance",
        )
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )
    token = credentials.credentials.strip()
    if not hmac.compare_digest(token.encode("utf-8"), settings.publish_token.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid bearer token",
        )
