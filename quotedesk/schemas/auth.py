"""schemas/auth.py — login payload."""

from __future__ import annotations

from pydantic import field_validator

from .base import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Email must not be blank")
        return v
