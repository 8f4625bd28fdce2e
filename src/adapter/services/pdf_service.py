"""ReportLab PDF Generation Service Implementation

Implements PDF rendering using ReportLab library.
"""

from io import BytesIO
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService, RenderableDocument

_PRIMARY = colors.HexColor("#2C3E50")
_MUTED = colors.HexColor("#7F8C8D")
_ACCENT = colors.HexColor("#E74C3C")
_GRID = colors.HexColor("#BDC3C7")


def _format_address(address: Optional[Dict[str, Any]]) -> str:
    if not address:
        return ""
    parts = [
        address.get("street") or address.get("line1"),
        address.get("line2"),
        address.get("city"),
        address.get("state"),
        address.get("postal_code"),
        address.get("country"),
    ]
    return ", ".join(str(part) for part in parts if part)


def _text(value: Any) -> str:
    return escape(str(value)) if value not in (None, "") else ""


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Lays out whatever RenderableDocument carries; it never looks anything up.
    """

    def render_document(self, document: RenderableDocument) -> bytes:
        """
        Render a document to PDF

        Args:
            document: Fully assembled document content

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=document.document_number or document.title,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=22,
            spaceAfter=6,
            textColor=_PRIMARY,
        )
        label_style = ParagraphStyle(
            "LabelStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=_ACCENT if document.is_proforma else _PRIMARY,
            spaceAfter=12,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=9,
            textColor=_MUTED,
        )
        normal_style = ParagraphStyle("NormalStyle", parent=styles["Normal"], fontSize=10)
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )
        small_style = ParagraphStyle(
            "SmallStyle",
            parent=styles["Normal"],
            fontSize=8,
            textColor=_MUTED,
        )

        elements: List[Any] = []

        # Issuer
        issuer = document.issuer or {}
        elements.append(Paragraph(_text(issuer.get("legal_name") or issuer.get("name")), title_style))
        for line in (
            _format_address(issuer.get("address")),
            issuer.get("contact_email"),
            issuer.get("contact_phone"),
            f"Tax ID: {issuer['tax_id']}" if issuer.get("tax_id") else None,
            f"RC: {issuer['registration_number']}" if issuer.get("registration_number") else None,
            f"VAT: {issuer['vat_registration_number']}" if issuer.get("vat_registration_number") else None,
        ):
            if line:
                elements.append(Paragraph(_text(line), header_style))
        elements.append(Spacer(1, 8 * mm))
        elements.append(Paragraph(document.title, label_style))

        # Document details
        details = [
            ["Number:", document.document_number or "Not issued"],
            ["Status:", document.status_label],
            ["Currency:", document.currency],
        ]
        if document.issue_date:
            details.append(["Issue date:", document.issue_date])
        if document.due_date:
            details.append(["Due date:", document.due_date])
        if document.issued_at:
            details.append(["Issued:", document.issued_at.strftime("%Y-%m-%d %H:%M:%S UTC")])
        for label, value in document.references:
            details.append([label, Paragraph(_text(value), normal_style)])

        details_table = Table(details, colWidths=[35 * mm, 105 * mm])
        details_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), _MUTED),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(details_table)
        elements.append(Spacer(1, 8 * mm))

        # Counterparty
        if document.counterparty:
            party = document.counterparty
            elements.append(Paragraph(document.counterparty_label, bold_style))
            for line in (
                party.get("name"),
                party.get("contact_person"),
                _format_address(party.get("address")),
                party.get("email"),
                f"Tax ID: {party['tax_id']}" if party.get("tax_id") else None,
            ):
                if line:
                    elements.append(Paragraph(_text(line), normal_style))
            elements.append(Spacer(1, 8 * mm))

        # Line items
        currency = document.currency
        line_data = [["Description", "Qty", "Unit Price", "Amount"]]
        for item in document.line_items:
            line_data.append(
                [
                    Paragraph(_text(item.get("description")), normal_style),
                    item.get("quantity") or "",
                    f"{currency} {item.get('unit_price') or '0.00'}",
                    f"{currency} {item.get('amount') or '0.00'}",
                ]
            )

        line_table = Table(line_data, colWidths=[80 * mm, 20 * mm, 35 * mm, 35 * mm])
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), _PRIMARY),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, _GRID),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F8F9F9")]),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 4 * mm))

        # Totals
        totals = document.totals or {}
        total_rows = []
        for key, label in (
            ("subtotal", "Subtotal:"),
            ("tax_amount", "Tax:"),
            ("discount_amount", "Discount:"),
            ("total_amount", "Total:"),
        ):
            if totals.get(key) is not None:
                total_rows.append(["", "", label, f"{currency} {totals[key]}"])

        if total_rows:
            totals_table = Table(total_rows, colWidths=[80 * mm, 20 * mm, 35 * mm, 35 * mm])
            totals_table.setStyle(
                TableStyle(
                    [
                        ("FONTNAME", (2, -1), (-1, -1), "Helvetica-Bold"),
                        ("FONTSIZE", (0, 0), (-1, -1), 10),
                        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                        ("LINEABOVE", (2, -1), (-1, -1), 1.5, _PRIMARY),
                    ]
                )
            )
            elements.append(totals_table)
            elements.append(Spacer(1, 8 * mm))

        # Payment instructions
        if document.payment_method:
            method = document.payment_method
            elements.append(Paragraph(f"Payment: {_text(method.get('display_name'))}", bold_style))
            for key, value in (method.get("instructions") or {}).items():
                elements.append(Paragraph(f"{_text(key)}: {_text(value)}", normal_style))
            elements.append(Spacer(1, 6 * mm))

        if document.notes:
            elements.append(Paragraph(_text(document.notes), normal_style))
        if document.terms:
            elements.append(Paragraph(_text(document.terms), small_style))

        # Integrity footer
        elements.append(Spacer(1, 10 * mm))
        if document.is_proforma:
            elements.append(
                Paragraph(
                    "<i>This is a proforma invoice for preview purposes only. "
                    "It is not a legally binding document until officially issued.</i>",
                    small_style,
                )
            )
        else:
            if document.verification_url:
                elements.append(Paragraph(f"Verify at: {_text(document.verification_url)}", small_style))
            if document.document_hash:
                elements.append(Paragraph(f"Document hash (SHA-256): {document.document_hash}", small_style))

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
