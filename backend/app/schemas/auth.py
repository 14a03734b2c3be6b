"""Schemas for POST /register and POST /upload."""

from pydantic import BaseModel, Field

from app.schemas.memory import CamelModel


class RegisterRequest(BaseModel):
    code: str = Field(min_length=1, description="GitHub OAuth authorization code")


class TokenResponse(BaseModel):
    token: str = Field(description="Signed JWT; send as `Authorization: Bearer <token>`")


class UploadResponse(CamelModel):
    file_url: str = Field(description="Public URL of the stored file under /uploads")
