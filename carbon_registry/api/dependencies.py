from __future__ import annotations

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from carbon_registry.core.config import SETTINGS
from carbon_registry.middleware.request_context import caller_var
from carbon_registry.models.principal import Principal
from carbon_registry.services import token_service
from carbon_registry.services.registry import CarbonRegistry
from carbon_registry.services.verifier_directory import admin_accounts_policy

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/token")

# Process-wide registry; tests swap it via app.dependency_overrides.
_registry = CarbonRegistry(is_admin=admin_accounts_policy(SETTINGS.admin_accounts))


def get_registry() -> CarbonRegistry:
    return _registry


async def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Validate the bearer token and return the calling account.

    Declared async so the caller ContextVar it sets is inherited by the
    sync route handler and shows up on the service's log lines.
    """
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    principal = Principal(
        account=claims["sub"],
        roles=frozenset(claims.get("roles", [])),
    )
    caller_var.set(principal.account)
    return principal


RegistryDep = Annotated[CarbonRegistry, Depends(get_registry)]
PrincipalDep = Annotated[Principal, Depends(require_user)]
