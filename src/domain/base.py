"""Base model shared by every persisted domain entity"""

import uuid
from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Common SQLModel base for domain tables"""
    pass


def generate_uuid() -> str:
    """Generate a random UUID4 string used as an opaque primary key"""
    return str(uuid.uuid4())
