#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the blog account API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- a lifecycle ``state`` column (active / revoked) instead of a soft-delete flag
- to_dict() that formats timestamps and removes SA internals

Notes:
- Records are never removed by the session flows; superseded rows are revoked
  so the history survives.
- Persistence goes through an explicit DBStorage handle, models do not reach
  for a global one.
"""

from __future__ import annotations

from datetime import datetime
import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class RecordState(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - state: ACTIVE until the record is superseded or deleted, then REVOKED
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    state = Column(
        Enum(RecordState, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        default=RecordState.ACTIVE,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        created_at/updated_at are left to the database defaults.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()
        if getattr(self, "state", None) is None:
            self.state = RecordState.ACTIVE

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

    @property
    def is_active(self) -> bool:
        return self.state == RecordState.ACTIVE

    def revoke(self):
        """Mark the record as superseded; the caller commits."""
        self.state = RecordState.REVOKED
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> dict:
        """
        Return a dictionary of fields suitable for logs and debugging:
        - formats created_at / updated_at to TIME_FMT
        - removes SQLAlchemy internal state
        - never exposes hashes or secrets
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state"}
        if isinstance(d.get("created_at"), datetime):
            d["created_at"] = d["created_at"].strftime(TIME_FMT)
        if isinstance(d.get("updated_at"), datetime):
            d["updated_at"] = d["updated_at"].strftime(TIME_FMT)
        if isinstance(d.get("state"), RecordState):
            d["state"] = d["state"].value
        for secret in ("hash", "image", "refresh_image", "token", "code"):
            d.pop(secret, None)
        d["__class__"] = self.__class__.__name__
        return d
