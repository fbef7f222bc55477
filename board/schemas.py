"""
Pydantic schemas for the message board API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SignInRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: str = Field(..., alias="idToken", min_length=1)


class PrincipalResponse(BaseModel):
    uid: str
    email: Optional[str] = None


class MessageCreateRequest(BaseModel):
    text: str


class MessageResponse(BaseModel):
    id: int
    sender: str
    text: str
    timestamp: datetime
