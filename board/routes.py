"""
HTTP routes for the message board API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from board.auth import IdentityVerifier, InvalidTokenError, Principal
from board.db import DbClient
from board.dependencies import (
    get_current_principal,
    get_db_client,
    get_identity_verifier,
    require_admin,
)
from board.schemas import (
    MessageCreateRequest,
    MessageResponse,
    PrincipalResponse,
    SignInRequest,
)

logger = logging.getLogger(__name__)

# Sign-in is the only route reachable without a bearer token.
public_router = APIRouter()
router = APIRouter(dependencies=[Depends(get_current_principal)])


@public_router.post("/auth/google", response_model=PrincipalResponse)
def sign_in_with_google(
    payload: SignInRequest,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
):
    """
    Exchange a Google/Firebase ID token for the caller's uid and e-mail.
    """
    try:
        principal = verifier.verify(payload.id_token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("Signed in %s", principal.uid)
    return PrincipalResponse(uid=principal.uid, email=principal.email)


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(get_current_principal)):
    return PrincipalResponse(uid=principal.uid, email=principal.email)


@router.post("/messages", status_code=200)
def create_message(
    payload: MessageCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: DbClient = Depends(get_db_client),
):
    db.create_message(sender=principal.uid, text=payload.text)
    return Response(status_code=200)


@router.get("/messages", response_model=list[MessageResponse])
def list_messages(
    principal: Principal = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    return [
        MessageResponse(
            id=record.id,
            sender=record.sender,
            text=record.text,
            timestamp=record.timestamp,
        )
        for record in db.list_messages()
    ]


# Registered last: any other path or method under the prefix still has to
# pass the bearer guard before it gets a 404.
@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
def not_found(path: str):
    raise HTTPException(status_code=404, detail="Not Found")
