"""FastAPI application exposing the Chirpy HTTP API."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .database import Database, DatabaseError
from .metrics import HitCounter, MetricsMiddleware
from .models import Chirp, User
from .sanitizer import ChirpTooLongError, clean_body, validate_length
from .security import HashingError, dummy_verify, hash_password, verify_password

logger = logging.getLogger("chirpy.api")

_METRICS_TEMPLATE = (
    "<html><body><h1>Welcome, Chirpy Admin</h1>"
    "<p>Chirpy has been visited {count} times!</p></body></html>"
)


class UserCredentials(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    email: str


class CreateChirpRequest(BaseModel):
    body: str
    user_id: Optional[uuid.UUID] = None


class ChirpResponse(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    body: str
    user_id: Optional[uuid.UUID]


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        created_at=user.created_at,
        updated_at=user.updated_at,
        email=user.email,
    )


def chirp_to_response(chirp: Chirp) -> ChirpResponse:
    return ChirpResponse(
        id=chirp.id,
        created_at=chirp.created_at,
        updated_at=chirp.updated_at,
        body=chirp.body,
        user_id=chirp.user_id,
    )


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def create_app(
    *,
    database: Database | None = None,
    settings: Settings | None = None,
    hits: HitCounter | None = None,
) -> FastAPI:
    if settings is None:
        settings = load_settings()

    if database is None:
        database = Database(settings.database_path)
        database.initialize()

    if hits is None:
        hits = HitCounter()

    app = FastAPI(
        title="Chirpy",
        description="Users, chirps and a little bit of instrumentation",
        version="1.0.0",
    )
    app.state.database = database
    app.state.settings = settings
    app.state.hits = hits

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Params could not be parsed"},
        )

    def get_db() -> Database:
        return database

    # ------------------------------------------------------------------
    # Health and admin
    # ------------------------------------------------------------------
    @app.get("/api/healthz", response_class=PlainTextResponse)
    async def healthcheck() -> str:
        return "OK"

    @app.get("/admin/metrics", response_class=HTMLResponse)
    async def read_metrics() -> str:
        return _METRICS_TEMPLATE.format(count=hits.value)

    @app.post("/admin/reset")
    def reset(db: Database = Depends(get_db)) -> int:
        if not settings.allows_reset:
            logger.warning("Refused admin reset on platform %s", settings.platform.value)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

        try:
            deleted = db.delete_users()
        except DatabaseError:
            logger.exception("Error deleting users")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong during db save",
            )
        hits.reset()
        logger.info("Deleted %d users", deleted)
        return deleted

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    @app.post("/api/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    def create_user(payload: UserCredentials, db: Database = Depends(get_db)) -> UserResponse:
        try:
            hashed = hash_password(payload.password)
        except HashingError:
            logger.exception("Error hashing password")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error hashing password",
            )

        try:
            user = db.create_user(payload.email, hashed)
        except DatabaseError:
            logger.exception("Error creating user")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong during db save",
            )

        logger.info("User created: %s", user.email)
        return user_to_response(user)

    @app.post("/api/login", response_model=UserResponse)
    def login(payload: UserCredentials, db: Database = Depends(get_db)) -> UserResponse:
        try:
            user = db.get_user_by_email(payload.email)
        except DatabaseError:
            logger.exception("User lookup failed for %s", payload.email)
            raise _unauthorized()

        if user is None:
            dummy_verify()
            logger.warning("Failed login attempt for unknown email %s", payload.email)
            raise _unauthorized()

        if not verify_password(payload.password, user.hashed_password):
            logger.warning("Failed login attempt for %s", payload.email)
            raise _unauthorized()

        logger.info("Login successful for user %s", user.id)
        return user_to_response(user)

    # ------------------------------------------------------------------
    # Chirps
    # ------------------------------------------------------------------
    @app.post("/api/chirps", response_model=ChirpResponse, status_code=status.HTTP_201_CREATED)
    def create_chirp(payload: CreateChirpRequest, db: Database = Depends(get_db)) -> ChirpResponse:
        try:
            body = validate_length(clean_body(payload.body))
        except ChirpTooLongError as exc:
            logger.info("Rejected chirp: %s", exc)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Chirp is too long")

        try:
            chirp = db.create_chirp(body, payload.user_id)
        except DatabaseError:
            logger.exception("Error saving chirp")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Database save failed",
            )
        return chirp_to_response(chirp)

    @app.get("/api/chirps", response_model=List[ChirpResponse])
    def list_chirps(db: Database = Depends(get_db)) -> List[ChirpResponse]:
        try:
            chirps = db.list_chirps()
        except DatabaseError:
            logger.exception("Error listing chirps")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong",
            )
        return [chirp_to_response(chirp) for chirp in chirps]

    @app.get("/api/chirps/{chirp_id}", response_model=ChirpResponse)
    def get_chirp(chirp_id: str, db: Database = Depends(get_db)) -> ChirpResponse:
        try:
            parsed_id = uuid.UUID(chirp_id)
        except ValueError:
            logger.info("Rejected chirp id %r", chirp_id)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bad value for UUID")

        try:
            chirp = db.get_chirp(parsed_id)
        except DatabaseError:
            logger.exception("Error loading chirp %s", parsed_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong",
            )
        if chirp is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No record has been found")
        return chirp_to_response(chirp)

    # ------------------------------------------------------------------
    # Static files
    # ------------------------------------------------------------------
    static_app = StaticFiles(directory=settings.static_dir, html=True)
    app.mount("/app", MetricsMiddleware(static_app, hits), name="app")

    return app


__all__ = ["ChirpResponse", "UserResponse", "create_app"]
