"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from ..exceptions import handle_sqlalchemy_errors
from .db_models import Base


def init_db(engine: Engine) -> None:
    """Create tables when missing (migrations handle upgrades)."""
    with handle_sqlalchemy_errors(entity="schema"):
        Base.metadata.create_all(engine)
