"""GenerateDocumentPdf Use Case

Renders an invoice, receipt or credit note to PDF. Issued documents are
rendered from their snapshot only; draft invoices render as a proforma
from live records.
"""

import base64
import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.pdf_service import PdfService, RenderableDocument
from src.app.services.snapshot_builder import (
    DocumentSnapshot,
    read_snapshot,
    build_issuer_snapshot,
    build_recipient_snapshot,
    build_line_items_snapshot,
    UNKNOWN_ISSUER,
)
from src.app.services.document_hasher import normalize_amount
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.receipt_repository import ReceiptRepository
from src.app.repositories.credit_note_repository import CreditNoteRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.client_repository import ClientRepository
from src.domain.document_status import DocumentType, InvoiceStatus, status_label
from src.domain.invoice import Invoice
from src.domain.issuable_document import IssuableDocument
from .access import check_document_access, document_not_found
from .dtos import DocumentPdfDTO

logger = logging.getLogger(__name__)

_TITLES = {
    DocumentType.INVOICE: "INVOICE",
    DocumentType.RECEIPT: "RECEIPT",
    DocumentType.CREDIT_NOTE: "CREDIT NOTE",
}

_COUNTERPARTY_LABELS = {
    DocumentType.INVOICE: "Bill To:",
    DocumentType.RECEIPT: "Received From:",
    DocumentType.CREDIT_NOTE: "Credit To:",
}


class GenerateDocumentPdf:
    """
    Use Case: Render a document PDF

    Business Rules:
    1. Any member of the business (viewers included) may download
    2. Issued documents: every printed field comes from the snapshot and the
       integrity columns; the hash and verification link are printed
    3. Receipts show the invoice and payment they acknowledge, credit notes
       the invoice they reverse and the reason
    4. Draft invoices: rendered as a proforma from live data, no hash or link
    5. Rendering never writes anything
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        receipt_repo: ReceiptRepository,
        credit_note_repo: CreditNoteRepository,
        business_repo: BusinessRepository,
        client_repo: ClientRepository,
        pdf_service: PdfService,
        verification_base_url: str,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.receipt_repo = receipt_repo
        self.credit_note_repo = credit_note_repo
        self.business_repo = business_repo
        self.client_repo = client_repo
        self.pdf_service = pdf_service
        self.verification_base_url = verification_base_url.rstrip("/")

    async def execute(
        self,
        document_id: str,
        actor_id: str,
        document_type: DocumentType = DocumentType.INVOICE,
    ) -> Result[DocumentPdfDTO]:
        """
        Execute PDF generation

        Args:
            document_id: Document to render
            actor_id: Authenticated user
            document_type: Which kind of document document_id refers to

        Returns:
            Result[DocumentPdfDTO]: Base64 PDF and file name or error
        """
        try:
            document = await self._load(document_type, document_id)
            if document is None:
                return Return.err(document_not_found(document_id))

            denied = await check_document_access(
                self.business_repo, document.business_id, actor_id, require_issuing_role=False
            )
            if denied:
                return Return.err(denied)

            if document_type == DocumentType.INVOICE and document.status == InvoiceStatus.DRAFT:
                renderable = await self._proforma(document)
            else:
                renderable = await self._issued(document)

            pdf_bytes = self.pdf_service.render_document(renderable)
            file_stem = document.document_number or f"proforma-{document.id}"

            return Return.ok(
                DocumentPdfDTO(
                    document_id=document.id,
                    document_type=document_type.value,
                    document_number=document.document_number,
                    filename=f"{file_stem}.pdf",
                    is_proforma=renderable.is_proforma,
                    pdf_base64=base64.b64encode(pdf_bytes).decode("utf-8"),
                    generated_at=datetime.utcnow(),
                )
            )

        except Exception as e:
            logger.error(f"Rendering {document_type.value} {document_id} failed: {e}")
            return Return.err(
                Error(
                    code="GENERATE_PDF_FAILED",
                    message=f"Failed to generate {document_type.value.replace('_', ' ')} PDF",
                    reason=str(e),
                )
            )

    def verification_url(self, verification_id: str) -> str:
        return f"{self.verification_base_url}/verify/{verification_id}"

    async def _load(self, document_type: DocumentType, document_id: str) -> Optional[IssuableDocument]:
        if document_type == DocumentType.RECEIPT:
            return await self.receipt_repo.get_by_id(document_id)
        if document_type == DocumentType.CREDIT_NOTE:
            return await self.credit_note_repo.get_by_id(document_id)
        return await self.invoice_repo.get_by_id(document_id)

    async def _issued(self, document: IssuableDocument) -> RenderableDocument:
        document_type = document.document_type
        snapshot = read_snapshot(document.snapshot)
        label = status_label(document_type, document.status.value)

        if snapshot is None:
            logger.warning(
                f"{document_type.value} {document.id} has no snapshot, rendering from live data"
            )
            renderable = await self._legacy(document, label)
        else:
            renderable = RenderableDocument(
                title=_TITLES[document_type],
                currency=snapshot.currency or document.currency,
                issuer=snapshot.issuer or {"name": UNKNOWN_ISSUER},
                status_label=label,
                document_number=document.document_number,
                counterparty=snapshot.counterparty,
                counterparty_label=_COUNTERPARTY_LABELS[document_type],
                line_items=snapshot.line_items,
                totals=snapshot.totals,
                issued_at=document.issued_at,
            )
            if document_type == DocumentType.RECEIPT:
                self._add_receipt_sections(renderable, snapshot)
            elif document_type == DocumentType.CREDIT_NOTE:
                self._add_credit_note_sections(renderable, snapshot)
            else:
                dates = snapshot.section("dates") or {}
                renderable.issue_date = dates.get("issue_date")
                renderable.due_date = dates.get("due_date")
                renderable.notes = snapshot.raw.get("notes")
                renderable.terms = snapshot.raw.get("terms")
                renderable.payment_method = snapshot.section("payment_method")

        renderable.document_hash = document.document_hash
        renderable.verification_url = (
            self.verification_url(document.verification_id) if document.verification_id else None
        )
        return renderable

    @staticmethod
    def _add_receipt_sections(renderable: RenderableDocument, snapshot: DocumentSnapshot):
        invoice = snapshot.section("invoice") or {}
        payment = snapshot.section("payment") or {}

        if invoice.get("invoice_number"):
            renderable.references.append(("Invoice:", invoice["invoice_number"]))
        for key, label in (
            ("payment_date", "Payment date:"),
            ("payment_method", "Method:"),
            ("payment_reference", "Reference:"),
        ):
            if payment.get(key):
                renderable.references.append((label, payment[key]))

        renderable.issue_date = payment.get("payment_date")
        renderable.line_items = [
            {
                "description": f"Payment for invoice {invoice.get('invoice_number') or ''}".strip(),
                "quantity": "1",
                "unit_price": payment.get("amount"),
                "amount": payment.get("amount"),
            }
        ]
        renderable.notes = payment.get("notes")

    @staticmethod
    def _add_credit_note_sections(renderable: RenderableDocument, snapshot: DocumentSnapshot):
        original = snapshot.section("original_invoice") or {}

        if original.get("invoice_number"):
            renderable.references.append(("Original invoice:", original["invoice_number"]))
        if original.get("total_amount"):
            renderable.references.append(
                ("Original total:", f"{original.get('currency') or renderable.currency} {original['total_amount']}")
            )
        if snapshot.raw.get("reason"):
            renderable.references.append(("Reason:", snapshot.raw["reason"]))

    async def _legacy(self, document: IssuableDocument, label: str) -> RenderableDocument:
        if isinstance(document, Invoice):
            return await self._from_live(document, title=_TITLES[DocumentType.INVOICE], label=label)

        business = await self.business_repo.get_by_id(document.business_id)
        return RenderableDocument(
            title=_TITLES[document.document_type],
            currency=document.currency,
            issuer=build_issuer_snapshot(business) or {"name": UNKNOWN_ISSUER},
            status_label=label,
            document_number=document.document_number,
            counterparty_label=_COUNTERPARTY_LABELS[document.document_type],
            totals={"total_amount": normalize_amount(document.total_amount)},
            issued_at=document.issued_at,
        )

    async def _proforma(self, invoice: Invoice) -> RenderableDocument:
        document = await self._from_live(invoice, title="PROFORMA INVOICE", label="Draft")
        document.is_proforma = True
        return document

    async def _from_live(self, invoice: Invoice, title: str, label: str) -> RenderableDocument:
        business = await self.business_repo.get_by_id(invoice.business_id)
        client = await self.client_repo.get_by_id(invoice.client_id) if invoice.client_id else None
        lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)

        return RenderableDocument(
            title=title,
            currency=invoice.currency,
            issuer=build_issuer_snapshot(business) or {"name": UNKNOWN_ISSUER},
            status_label=label,
            document_number=invoice.document_number,
            counterparty=build_recipient_snapshot(client),
            line_items=build_line_items_snapshot(lines),
            totals={
                "subtotal": normalize_amount(invoice.subtotal),
                "tax_amount": normalize_amount(invoice.tax_amount),
                "discount_amount": normalize_amount(invoice.discount_amount),
                "total_amount": normalize_amount(invoice.total_amount),
            },
            issue_date=invoice.issue_date.isoformat() if invoice.issue_date else None,
            due_date=invoice.due_date.isoformat() if invoice.due_date else None,
            issued_at=invoice.issued_at,
            notes=invoice.notes,
            terms=invoice.terms,
        )
