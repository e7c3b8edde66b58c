# Re-export the main Base class from db.py for chances models
# This ensures all models share the same metadata
import uuid

from db import Base


def new_id() -> str:
    return str(uuid.uuid4())


__all__ = ["Base", "new_id"]
