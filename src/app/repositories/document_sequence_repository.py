"""Document Sequence Repository Interface

Defines the contract for allocating document numbers.
"""

from abc import ABC, abstractmethod


class DocumentSequenceRepository(ABC):
    """
    Repository interface for per-scope document counters

    allocate() must be safe under concurrency: two transactions allocating
    in the same (business, document type, scope) never receive the same
    value. Allocation participates in the caller's transaction, so a
    rollback returns the number to the sequence.
    """

    @abstractmethod
    async def allocate(self, business_id: str, document_type: str, scope: str) -> int:
        """
        Allocate the next number in a scope

        Args:
            business_id: Issuing business
            document_type: Document type value (invoice, receipt, credit_note)
            scope: Numbering scope (calendar year)

        Returns:
            Allocated sequence value, starting at 1
        """
        pass


class SequenceConflictError(Exception):
    """Raised when a sequence row could not be allocated after retrying"""
