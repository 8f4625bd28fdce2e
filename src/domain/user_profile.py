"""User Profile Domain Entity

Identity data mirrored from the authentication provider. Only the fields the
issuance compliance gate needs are kept here.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field
from src.domain.base import BaseModel, generate_uuid


class UserProfile(BaseModel, table=True):
    """
    User Profile - Authenticated user known to the platform

    Domain Rules:
    - Users whose email is not verified may not issue financial documents
    """

    __tablename__ = "user_profiles"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    email: str = Field(max_length=255, index=True)
    full_name: Optional[str] = Field(default=None, max_length=255)
    email_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
