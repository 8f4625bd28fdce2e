"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class RenderableDocument:
    """
    Everything printed on a document

    For issued documents every field is taken from the snapshot; only
    draft proformas are assembled from live records. references holds
    extra (label, value) rows for the details block, such as the invoice
    a receipt pays.
    """

    title: str
    currency: str
    issuer: Dict[str, Any]
    status_label: str
    document_number: Optional[str] = None
    counterparty: Optional[Dict[str, Any]] = None
    counterparty_label: str = "Bill To:"
    references: List[Tuple[str, str]] = field(default_factory=list)
    line_items: List[Dict[str, Any]] = field(default_factory=list)
    totals: Dict[str, Any] = field(default_factory=dict)
    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    issued_at: Optional[datetime] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    payment_method: Optional[Dict[str, Any]] = None
    document_hash: Optional[str] = None
    verification_url: Optional[str] = None
    is_proforma: bool = False


class PdfService(ABC):
    """
    Service interface for PDF generation
    """

    @abstractmethod
    def render_document(self, document: RenderableDocument) -> bytes:
        """
        Render a document to PDF

        Args:
            document: Fully assembled document content

        Returns:
            PDF document as bytes
        """
        pass
