from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ServerConfig
from .db import EmailTaken, UserRepository
from .schemas import (
    AuthOut,
    HighScoreOut,
    LeaderboardEntry,
    LoginIn,
    RegisterIn,
    ScoreIn,
    UserDetailOut,
    UserOut,
)
from .security import hash_password, issue_token, read_token, verify_password


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def get_repo(request: Request) -> UserRepository:
    return request.app.state.repo


def get_config(request: Request) -> ServerConfig:
    return request.app.state.config


def current_user_id(
    authorization: Optional[str] = Header(default=None),
    config: ServerConfig = Depends(get_config),
) -> str:
    header = authorization or ""
    token = header[7:] if header.startswith("Bearer ") else None
    if not token:
        raise HTTPException(401, "No token provided")
    user_id = read_token(token, config.jwt_secret)
    if user_id is None:
        raise HTTPException(401, "Invalid or expired token")
    return user_id


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    config = config or ServerConfig.from_env()
    repo = UserRepository(config.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await repo.init()
        logger.info("User store ready at %s", config.db_path)
        yield

    app = FastAPI(title="Wood Block Leaderboard", version="1.0", lifespan=lifespan)
    app.state.config = config
    app.state.repo = repo

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("REQ %s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse({"message": "Invalid request body"}, status_code=400)

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"message": "Server error"}, status_code=500)

    def _auth_response(user: dict) -> AuthOut:
        token = issue_token(user["id"], config.jwt_secret, config.token_ttl_seconds)
        return AuthOut(user=UserOut.from_row(user), token=token)

    @app.post("/api/auth/register", response_model=AuthOut)
    async def register(body: RegisterIn, repo: UserRepository = Depends(get_repo)):
        name = body.name.strip()
        email = body.email.strip()
        if not name or not email or not body.password:
            raise HTTPException(400, "Missing fields")
        if await repo.find_by_email(email) is not None:
            raise HTTPException(400, "Email already exists")
        password_hash = await run_in_threadpool(hash_password, body.password, config.bcrypt_rounds)
        try:
            user = await repo.create(name, email, password_hash)
        except EmailTaken:
            raise HTTPException(400, "Email already exists")
        logger.info("Registered user %s", user["id"])
        return _auth_response(user)

    @app.post("/api/auth/login", response_model=AuthOut)
    async def login(body: LoginIn, repo: UserRepository = Depends(get_repo)):
        email = body.email.strip()
        if not email or not body.password:
            raise HTTPException(400, "Missing fields")
        user = await repo.find_by_email(email)
        # Same answer for unknown email and wrong password
        if user is None:
            raise HTTPException(400, INVALID_CREDENTIALS)
        if not await run_in_threadpool(verify_password, body.password, user["password_hash"]):
            raise HTTPException(400, INVALID_CREDENTIALS)
        return _auth_response(user)

    @app.post("/api/score/update", response_model=HighScoreOut)
    async def update_score(
        body: ScoreIn,
        user_id: str = Depends(current_user_id),
        repo: UserRepository = Depends(get_repo),
    ):
        stored = await repo.raise_high_score(user_id, body.score)
        if stored is None:
            raise HTTPException(404, "User not found")
        logger.info("Score %d reported by %s, high score %d", body.score, user_id, stored)
        return HighScoreOut(high_score=stored)

    @app.get("/api/leaderboard", response_model=List[LeaderboardEntry])
    async def leaderboard(repo: UserRepository = Depends(get_repo)):
        rows = await repo.top(config.leaderboard_size)
        return [LeaderboardEntry(name=r["name"], high_score=r["high_score"]) for r in rows]

    @app.get("/api/users", response_model=List[UserDetailOut])
    async def users(repo: UserRepository = Depends(get_repo)):
        return [UserDetailOut.from_row(r) for r in await repo.all()]

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    return app
