from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from woodblock.storage.persistence import Preferences


logger = logging.getLogger(__name__)

DEFAULT_API = "http://localhost:5000"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LeaderboardClient:
    """Thin client for the leaderboard service.

    Token and current user are kept in memory and, when `preferences` is
    given, saved across runs.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API,
        http: Optional[httpx.Client] = None,
        preferences: Optional[Preferences] = None,
        timeout: float = 10.0,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.preferences = preferences
        self.token: Optional[str] = preferences.token() if preferences else None
        self.current_user: Optional[Dict[str, Any]] = preferences.current_user() if preferences else None

    # ---------- Helpers ----------
    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _set_session(self, token: Optional[str], user: Optional[Dict[str, Any]]) -> None:
        self.token = token
        self.current_user = user
        if self.preferences is not None:
            self.preferences.set_token(token)
            self.preferences.set_current_user(user)

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            res = self.http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise ApiError(f"Could not reach leaderboard service: {exc}") from exc
        try:
            data = res.json()
        except ValueError:
            data = {}
        if res.is_error:
            msg = data.get("message") if isinstance(data, dict) else None
            msg = msg or f"API error (status {res.status_code})"
            logger.error("API error: %s status: %s", msg, res.status_code)
            raise ApiError(msg, res.status_code)
        return data

    # ---------- Auth ----------
    def _auth_session(self, data: Any, what: str) -> Dict[str, Any]:
        if not isinstance(data, dict) or not isinstance(data.get("token"), str) or not isinstance(data.get("user"), dict):
            raise ApiError(f"Malformed {what} response")
        self._set_session(data["token"], data["user"])
        return data["user"]

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/register", {"name": name, "email": email, "password": password})
        return self._auth_session(data, "register")

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        return self._auth_session(data, "login")

    def logout(self) -> None:
        self._set_session(None, None)

    # ---------- Scores ----------
    def update_score(self, score: int) -> Optional[int]:
        """Push a finished game's score; returns the server's high score, or None when logged out."""
        if not self.is_authenticated:
            logger.info("Not logged in, skipping score update")
            return None
        data = self._request("POST", "/api/score/update", {"score": int(score)})
        high_score = data.get("highScore") if isinstance(data, dict) else None
        if isinstance(high_score, bool) or not isinstance(high_score, int):
            raise ApiError("Malformed score update response")
        if self.current_user is not None:
            self._set_session(self.token, {**self.current_user, "highScore": high_score})
        return high_score

    def _list(self, path: str, what: str) -> List[Dict[str, Any]]:
        data = self._request("GET", path)
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ApiError(f"Malformed {what} response")
        return data

    def leaderboard(self) -> List[Dict[str, Any]]:
        return self._list("/api/leaderboard", "leaderboard")

    def users(self) -> List[Dict[str, Any]]:
        return self._list("/api/users", "users")

    def close(self) -> None:
        self.http.close()
