"""Domain models stored in the Chirpy database."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Represents a user account stored in the Chirpy database."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    email: str
    hashed_password: str = field(repr=False)


@dataclass(frozen=True)
class Chirp:
    """A short post authored by a user."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    body: str
    user_id: Optional[uuid.UUID]


__all__ = ["Chirp", "User"]
