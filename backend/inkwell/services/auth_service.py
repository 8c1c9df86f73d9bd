"""
Inkwell Backend: Account Service
=================================

What:  Registration, login and profile lookup.
How:   Stores bcrypt hashes, issues tokens in the payload shape the token
       verifier expects. Emails are compared lower-cased.
"""

import logging
import uuid
from datetime import timedelta

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.config import Settings
from inkwell.exceptions import (
    AuthenticationError,
    CredentialFailure,
    DatabaseError,
    InkwellError,
    ValidationError,
)
from inkwell.models.user import User
from inkwell.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from inkwell.security import Claim, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:

    def _issue(self, user_id: uuid.UUID, settings: Settings) -> TokenResponse:
        token = create_access_token(
            user_id,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )
        return TokenResponse(token=token)

    async def register(
        self, db: AsyncSession, payload: RegisterRequest, settings: Settings
    ) -> TokenResponse:
        """
        Create an account and return a token for it.

        Raises:
            ValidationError: username or email already taken (→ 400)
        """
        email = payload.email.lower()
        try:
            result = await db.execute(
                select(User).where(or_(User.email == email, User.username == payload.username))
            )
            if result.scalars().first() is not None:
                raise ValidationError(message="User already exists", field="email")

            user = User(
                username=payload.username,
                email=email,
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same name or email
            logger.info("Registration for %s hit a unique constraint", payload.username)
            raise ValidationError(message="User already exists", field="email")
        except InkwellError:
            raise
        except Exception as e:
            logger.error("Database error registering %s: %s", payload.username, str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Registered user %s (%s)", user.id, user.username)
        return self._issue(user.id, settings)

    async def login(
        self, db: AsyncSession, payload: LoginRequest, settings: Settings
    ) -> TokenResponse:
        """
        Exchange email + password for a token.

        Unknown email and wrong password give the same answer.
        """
        try:
            result = await db.execute(select(User).where(User.email == payload.email.lower()))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError(CredentialFailure.INVALID, message="Invalid credentials")

        return self._issue(user.id, settings)

    async def get_profile(self, db: AsyncSession, claim: Claim) -> UserResponse:
        try:
            user = await db.get(User, claim.user_id)
        except Exception as e:
            logger.error("Database error loading user %s: %s", claim.subject, str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            raise AuthenticationError(CredentialFailure.INVALID)
        return UserResponse.model_validate(user)


auth_service = AuthService()
