"""
Inkwell Backend: Token Verifier, Token Issuer and Password Hashing
===================================================================

What:  Everything that touches credentials.
How:   python-jose signs and verifies HS256 tokens; passlib's bcrypt context
       hashes passwords.

Verification as a result, not an exception:
    `verify_authorization()` never raises. It returns a `Verification` that
    holds either a `Claim` or a `CredentialFailure`, so it can be composed
    and unit-tested as a plain function. The FastAPI dependency in
    `inkwell.dependencies` is the only place a failure becomes an exception
    (and therefore a 401 that stops the request before the handler runs).
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from inkwell.exceptions import CredentialFailure
from inkwell.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ══════════════════════════════════════════════════════════════════════════
# Claims
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Claim:
    """Identity extracted from a verified token. Lives for one request."""

    user_id: uuid.UUID

    @property
    def subject(self) -> str:
        """The user id as stored in post documents (author and like lists)."""
        return str(self.user_id)


@dataclass(frozen=True)
class Verification:
    """Outcome of verifying an Authorization header: a claim or a failure."""

    claim: Optional[Claim] = None
    failure: Optional[CredentialFailure] = None

    @property
    def ok(self) -> bool:
        return self.claim is not None

    @classmethod
    def success(cls, claim: Claim) -> "Verification":
        return cls(claim=claim)

    @classmethod
    def rejected(cls, failure: CredentialFailure) -> "Verification":
        return cls(failure=failure)


# ══════════════════════════════════════════════════════════════════════════
# Token Verifier
# ══════════════════════════════════════════════════════════════════════════


def strip_bearer(header_value: str) -> str:
    """Remove a leading "Bearer " scheme marker if present."""
    if header_value.startswith(BEARER_PREFIX):
        return header_value[len(BEARER_PREFIX):]
    return header_value


def verify_authorization(
    header_value: Optional[str],
    secret: str,
    algorithm: str = "HS256",
) -> Verification:
    """
    Validate a raw Authorization header value.

    Steps:
        1. Absent or blank header → MISSING
        2. No signing secret configured → INVALID (nothing can verify)
        3. Strip the optional "Bearer " prefix
        4. Verify signature and expiry with python-jose → INVALID on failure
        5. Validate the payload shape ({"user": {"id": <uuid>}}) → INVALID
           on failure
        6. Return the claim

    Args:
        header_value: The Authorization header exactly as received (or None)
        secret: Server-held signing secret
        algorithm: JWT algorithm the secret is used with

    Returns:
        Verification carrying a Claim on success, a CredentialFailure otherwise
    """
    if header_value is None or not header_value.strip():
        return Verification.rejected(CredentialFailure.MISSING)

    # An empty HMAC key would accept tokens anyone can sign
    if not secret:
        logger.error("Token rejected: JWT_SECRET is not configured")
        return Verification.rejected(CredentialFailure.INVALID)

    token = strip_bearer(header_value.strip()).strip()
    if not token:
        return Verification.rejected(CredentialFailure.MISSING)

    try:
        # ExpiredSignatureError and JWTClaimsError are both JWTError subclasses
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        token_data = TokenPayload.model_validate(payload)
    except JWTError as e:
        logger.info("Token rejected: %s", type(e).__name__)
        return Verification.rejected(CredentialFailure.INVALID)
    except PydanticValidationError:
        logger.info("Token rejected: payload has no usable user id")
        return Verification.rejected(CredentialFailure.INVALID)

    return Verification.success(Claim(user_id=token_data.user.id))


# ══════════════════════════════════════════════════════════════════════════
# Token Issuer
# ══════════════════════════════════════════════════════════════════════════


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=6),
) -> str:
    """Sign a token whose payload the verifier above accepts."""
    now = datetime.now(timezone.utc)
    payload = {
        "user": {"id": str(user_id)},
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


# ══════════════════════════════════════════════════════════════════════════
# Password Hashing
# ══════════════════════════════════════════════════════════════════════════


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)
