"""Retention date calculation

retention_locked_until is computed once, when a document is issued, from
the policy in force at that moment. It is never recomputed afterwards.
"""

import logging
from datetime import date
from typing import Optional

from src.app.repositories.retention_policy_repository import RetentionPolicyRepository
from src.domain.document_status import DocumentType

logger = logging.getLogger(__name__)


def add_years(start: date, years: int) -> date:
    """Same calendar day `years` later; Feb 29 maps to Feb 28 in non-leap years"""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


class RetentionCalculator:
    """
    Resolves the retention period for a document

    Lookup order:
    1. Policy for (jurisdiction, document type)
    2. Policy for (jurisdiction, invoice)
    3. default_years
    """

    def __init__(
        self,
        policy_repo: RetentionPolicyRepository,
        default_years: int = 7,
        default_jurisdiction: str = "NG",
    ):
        self.policy_repo = policy_repo
        self.default_years = default_years
        self.default_jurisdiction = default_jurisdiction

    async def retention_years(self, jurisdiction: Optional[str], document_type: DocumentType) -> int:
        jurisdiction = jurisdiction or self.default_jurisdiction

        policy = await self.policy_repo.get_policy(jurisdiction, document_type.value)
        if policy is None and document_type != DocumentType.INVOICE:
            policy = await self.policy_repo.get_policy(jurisdiction, DocumentType.INVOICE.value)

        if policy is None:
            logger.info(
                f"No retention policy for {jurisdiction}/{document_type.value}, "
                f"using default of {self.default_years} years"
            )
            return self.default_years

        return policy.retention_years

    async def locked_until(
        self,
        jurisdiction: Optional[str],
        document_type: DocumentType,
        issued_on: date,
    ) -> date:
        """
        Compute retention_locked_until for a document issued on issued_on

        Args:
            jurisdiction: Issuer jurisdiction (falls back to the configured default)
            document_type: Kind of document being issued
            issued_on: Issuance date (UTC)

        Returns:
            Date after which the document may be deleted
        """
        years = await self.retention_years(jurisdiction, document_type)
        return add_years(issued_on, years)
