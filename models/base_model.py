#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the To-Do List API.

- Integer autoincrement primary key
- created_at / updated_at timestamps, stored as naive UTC
- keyword-argument constructor so models can be built without a session

Timestamps are set on the Python side so that SQLite and PostgreSQL hand back
the same naive UTC values that the services compare against.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time without tzinfo (the storage format for every column)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - __init__ accepting column values as kwargs
    - to_dict() with timestamp formatting
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def to_dict(self) -> dict:
        """
        Column values only: SQLAlchemy state is dropped, timestamps are
        formatted with TIME_FMT and password hashes never leave the model.
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state"}
        for key in ("created_at", "updated_at", "expires_at"):
            if isinstance(d.get(key), datetime):
                d[key] = d[key].strftime(TIME_FMT)
        d.pop("password_hash", None)
        d["__class__"] = self.__class__.__name__
        return d
