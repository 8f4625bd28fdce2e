"""Access checks shared by authenticated document use cases

Authentication happens upstream; these checks only decide whether an
already-identified user may act on a business's documents.
"""

from typing import Optional
from libs.result import Error
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.user_profile_repository import UserProfileRepository
from src.domain.business import ISSUING_ROLES


async def check_document_access(
    business_repo: BusinessRepository,
    business_id: str,
    actor_id: str,
    require_issuing_role: bool = True,
) -> Optional[Error]:
    """
    Verify the actor is a member of the business

    Args:
        business_repo: Business repository
        business_id: Business owning the document
        actor_id: Authenticated user
        require_issuing_role: If True, viewers are rejected

    Returns:
        None if access is granted, otherwise an ACCESS_DENIED error
    """
    membership = await business_repo.get_membership(business_id, actor_id)
    if membership is None:
        return Error(
            code="ACCESS_DENIED",
            message="You do not have access to this document",
            reason=f"User {actor_id} is not a member of business {business_id}",
        )

    if require_issuing_role and membership.role not in ISSUING_ROLES:
        return Error(
            code="ACCESS_DENIED",
            message="Your role does not allow this action",
            reason=f"Role {membership.role.value} cannot issue documents",
        )

    return None


async def check_verified_identity(
    user_repo: UserProfileRepository,
    actor_id: str,
) -> Optional[Error]:
    """Issuing requires a verified email address on the acting user"""
    profile = await user_repo.get_by_id(actor_id)
    if profile is None or not profile.email_verified:
        return Error(
            code="IDENTITY_NOT_VERIFIED",
            message="Please verify your email address before issuing documents",
            reason=f"User {actor_id} has no verified email",
        )
    return None


def document_not_found(document_id: str) -> Error:
    return Error(
        code="DOCUMENT_NOT_FOUND",
        message="Document not found",
        reason=f"No document with id {document_id}",
    )
