"""SQLite-backed persistence for users and chirps."""
from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from .models import Chirp, User

_SQLITE_URL_PREFIX = "sqlite:///"


class DatabaseError(RuntimeError):
    """Raised for any failure reported by the underlying datastore."""


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database.

    ``env_value`` may be a plain filesystem path or a ``sqlite:///`` URL.
    """

    if env_value:
        raw = env_value.strip()
        if raw.startswith(_SQLITE_URL_PREFIX):
            raw = raw[len(_SQLITE_URL_PREFIX):]
        if raw:
            return Path(raw).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "chirpy.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """Simple wrapper around SQLite for persisting users and chirps."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, committing on success and always closing it."""

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise DatabaseError(f"Could not open database at {self._path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._transaction() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    hashed_password TEXT NOT NULL DEFAULT 'unset'
                );

                CREATE TABLE IF NOT EXISTS chirps (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    body TEXT NOT NULL,
                    user_id TEXT REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_chirps_user_id ON chirps(user_id);
                """
            )

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create_user(self, email: str, hashed_password: str) -> User:
        """Insert a user with an already hashed password and return it."""

        now = _current_timestamp()
        user = User(
            id=uuid.uuid4(),
            created_at=now,
            updated_at=now,
            email=email,
            hashed_password=hashed_password,
        )
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO users (id, created_at, updated_at, email, hashed_password)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(user.id),
                    _serialize_datetime(user.created_at),
                    _serialize_datetime(user.updated_at),
                    user.email,
                    user.hashed_password,
                ),
            )
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def list_users(self) -> List[User]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY created_at, rowid").fetchall()
        return [self._row_to_user(row) for row in rows]

    def delete_users(self) -> int:
        """Delete every user (and, by cascade, their chirps); return the row count."""

        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM users")
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Chirps
    # ------------------------------------------------------------------
    def create_chirp(self, body: str, user_id: Optional[uuid.UUID]) -> Chirp:
        now = _current_timestamp()
        chirp = Chirp(
            id=uuid.uuid4(),
            created_at=now,
            updated_at=now,
            body=body,
            user_id=user_id,
        )
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO chirps (id, created_at, updated_at, body, user_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(chirp.id),
                    _serialize_datetime(chirp.created_at),
                    _serialize_datetime(chirp.updated_at),
                    chirp.body,
                    str(user_id) if user_id is not None else None,
                ),
            )
        return chirp

    def list_chirps(self) -> List[Chirp]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM chirps ORDER BY created_at, rowid").fetchall()
        return [self._row_to_chirp(row) for row in rows]

    def get_chirp(self, chirp_id: uuid.UUID) -> Optional[Chirp]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM chirps WHERE id = ?", (str(chirp_id),)).fetchone()
        if row is None:
            return None
        return self._row_to_chirp(row)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=uuid.UUID(row["id"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
            email=str(row["email"]),
            hashed_password=str(row["hashed_password"]),
        )

    def _row_to_chirp(self, row: sqlite3.Row) -> Chirp:
        user_id = row["user_id"]
        return Chirp(
            id=uuid.UUID(row["id"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
            body=str(row["body"]),
            user_id=uuid.UUID(user_id) if user_id else None,
        )


__all__ = ["Database", "DatabaseError", "resolve_database_path"]
