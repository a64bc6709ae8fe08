"""
Request and response bodies for the leaderboard API.

JSON uses camelCase (`highScore`, `createdAt`); Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterIn(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginIn(BaseModel):
    email: str = ""
    password: str = ""


class ScoreIn(BaseModel):
    score: int


class UserOut(_CamelModel):
    id: str
    name: str
    email: str
    high_score: int = Field(0, alias="highScore")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserOut":
        return cls(id=row["id"], name=row["name"], email=row["email"], high_score=row["high_score"])


class UserDetailOut(UserOut):
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserDetailOut":
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            high_score=row["high_score"],
            created_at=datetime.fromtimestamp(row["created_at"], tz=timezone.utc),
        )


class AuthOut(BaseModel):
    user: UserOut
    token: str


class HighScoreOut(_CamelModel):
    high_score: int = Field(alias="highScore")


class LeaderboardEntry(_CamelModel):
    name: str
    high_score: int = Field(alias="highScore")
