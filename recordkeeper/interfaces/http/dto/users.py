from __future__ import annotations

from pydantic import BaseModel, Field


class UserCredentialsDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    # Byte length is enforced by the credential hasher (72 bytes).
    password: str = Field(min_length=1)


class AuthTokenDTO(BaseModel):
    id: int
    token: str


class DeletedDTO(BaseModel):
    deleted: int
