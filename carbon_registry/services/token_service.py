"""JWT access tokens (ES256) carrying the caller's account identity.

The registry trusts the ``sub`` claim as the caller of every ledger
operation. Tokens are minted by the wallet/identity layer in front of
the registry and verified here against ``JWT_PUBLIC_KEY``.

Without a configured key (dev and test only) an ephemeral key pair is
generated on import, and ``create_access_token`` signs with it for local
tooling and tests. With a configured key the registry only verifies.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from carbon_registry.core.config import SETTINGS, Settings

logger = logging.getLogger(__name__)


def _load_keys(
    settings: Settings,
) -> tuple[ec.EllipticCurvePrivateKey | None, ec.EllipticCurvePublicKey]:
    if settings.jwt_public_key:
        key = serialization.load_pem_public_key(settings.jwt_public_key.encode())
        if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(
            key.curve, ec.SECP256R1
        ):
            raise ValueError("JWT_PUBLIC_KEY must be a P-256 EC public key")
        return None, key

    if settings.is_prod:
        raise ValueError("JWT_PUBLIC_KEY is required when APP_ENV=prod")
    logger.info("No JWT_PUBLIC_KEY configured, using an ephemeral signing key")
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


_private_key, _public_key = _load_keys(SETTINGS)

ALGORITHM = "ES256"
ISSUER = "carbon-registry"
AUDIENCE = "carbon-registry"
ACCESS_TOKEN_TTL_MIN = 15


def create_access_token(*, sub: str, roles: list[str] | None = None) -> str:
    if _private_key is None:
        raise RuntimeError("no signing key: tokens come from the identity provider")
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_TTL_MIN),
        "iat": now,
        "jti": str(uuid.uuid4()),
        "roles": roles or [],
    }
    return jwt.encode(payload, _private_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and claims, return the payload.

    The algorithm is pinned to ES256. Raises jwt.ExpiredSignatureError or
    jwt.InvalidTokenError on failure.
    """
    return jwt.decode(
        token,
        _public_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "exp", "iat", "jti"]},
    )
