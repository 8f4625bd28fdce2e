"""Business Domain Entities

Business profiles issue documents; members are the users allowed to act
on a business's documents.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from sqlmodel import Field, Index
from sqlalchemy import JSON, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class BusinessRole(str, Enum):
    """Roles a user can hold on a business"""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


# Roles allowed to issue, void and take payments on documents
ISSUING_ROLES = frozenset({BusinessRole.OWNER, BusinessRole.ADMIN, BusinessRole.MEMBER})


class Business(BaseModel, table=True):
    """
    Business - Issuer identity printed on every document

    Every field here can change at any time; issued documents keep their own
    copy in the snapshot taken at issuance.
    """

    __tablename__ = "businesses"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    name: str = Field(max_length=255, description="Trading name")
    legal_name: Optional[str] = Field(default=None, max_length=255)
    tax_id: Optional[str] = Field(default=None, max_length=64)
    registration_number: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Company registration number (e.g. CAC number)"
    )
    vat_registration_number: Optional[str] = Field(default=None, max_length=64)
    is_vat_registered: bool = Field(default=False)
    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=64)
    address: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    logo_url: Optional[str] = Field(default=None, max_length=1024)
    jurisdiction: str = Field(
        default="NG",
        max_length=2,
        description="ISO 3166-1 alpha-2 country whose rules apply"
    )
    document_prefix: str = Field(
        default="INV",
        max_length=16,
        description="Prefix used in document numbers"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class BusinessMember(BaseModel, table=True):
    """Membership of a user in a business"""

    __tablename__ = "business_members"
    __table_args__ = (
        UniqueConstraint('business_id', 'user_id', name='uq_business_members_business_user'),
        Index('ix_business_members_user_id', 'user_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id")
    user_id: str = Field(foreign_key="user_profiles.id")
    role: BusinessRole = Field(default=BusinessRole.MEMBER)
    created_at: datetime = Field(default_factory=datetime.utcnow)
