"""
Inkwell Backend: Request Dependencies
======================================

What:  FastAPI dependencies shared by the routers.
How:   Everything is read from `request.app.state`, which the application
       factory and lifespan populate. Nothing here holds state of its own.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.config import Settings
from inkwell.database import get_db_session
from inkwell.exceptions import AuthenticationError
from inkwell.middleware.request_id import request_id_var
from inkwell.security import Claim, verify_authorization

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


async def get_current_claim(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> Claim:
    """
    Authentication stage of the request pipeline.

    Runs the token verifier and, on failure, raises AuthenticationError so
    the route handler never executes. The global handler turns it into 401.
    """
    settings = get_settings(request)
    verification = verify_authorization(
        authorization,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    if not verification.ok:
        logger.warning(
            "[%s] Rejected credential on %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            verification.failure.code,
        )
        raise AuthenticationError(verification.failure)
    return verification.claim


# Type annotations for dependency injection
CurrentClaim = Annotated[Claim, Depends(get_current_claim)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]
