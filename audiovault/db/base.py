# ============================================================================
# FILE: audiovault/db/base.py
# ============================================================================
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def import_models() -> None:
    """Register every model on Base.metadata before create_all"""
    from audiovault.db.models import audio, playlist, user  # noqa: F401
