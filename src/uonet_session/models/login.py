"""Result of a completed login handshake."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginResult(BaseModel):
    is_edu_one: bool = False
    student_schools: list[str] = Field(default_factory=list)  # per-student module URLs
