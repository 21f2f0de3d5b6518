"""Declarative base and id helper for all models."""

import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Opaque string identifier used as primary key."""
    return str(uuid.uuid4())
