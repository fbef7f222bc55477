"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from board.auth import (
    AdminAllowList,
    FirebaseIdentityVerifier,
    IdentityVerifier,
    InMemoryIdentityVerifier,
    InvalidTokenError,
    Principal,
)
from board.config import get_settings
from board.db import DbClient, InMemoryDbClient, PostgresDbClient

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_db_client: DbClient | None = None
_identity_verifier: IdentityVerifier | None = None
_admin_allow_list: AdminAllowList | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so the connection pool is shared across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_identity_verifier() -> IdentityVerifier:
    global _identity_verifier
    if _identity_verifier:
        return _identity_verifier

    settings = get_settings()
    if settings.use_in_memory_backends:
        _identity_verifier = InMemoryIdentityVerifier()
    else:
        _identity_verifier = FirebaseIdentityVerifier(
            project_id=settings.firebase_project_id,
            credentials_path=settings.google_application_credentials,
            check_revoked=settings.firebase_check_revoked,
        )
    return _identity_verifier


def get_admin_allow_list() -> AdminAllowList:
    """
    Return the admin allow-list loaded once from settings at first use.
    """
    global _admin_allow_list
    if _admin_allow_list is None:
        _admin_allow_list = AdminAllowList(get_settings().admin_email_list())
    return _admin_allow_list


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """
    Resolve the bearer token to a principal and attach it to the request.

    Runs before any protected handler; a missing or rejected token ends the
    request with 401.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token")
    try:
        principal = verifier.verify(credentials.credentials)
    except InvalidTokenError:
        raise _unauthorized("Unauthorized")
    request.state.principal = principal
    return principal


def require_admin(
    principal: Principal = Depends(get_current_principal),
    allow_list: AdminAllowList = Depends(get_admin_allow_list),
) -> Principal:
    if not allow_list.is_admin(principal):
        logger.warning("Non-admin %s attempted to list messages", principal.uid)
        raise HTTPException(status_code=403, detail="Access restricted")
    return principal
