"""Unit tests for snapshot builders and the snapshot reader

Tests cover:
- Invoice snapshot sections and money formatting
- Snapshots are detached from later edits to source records
- Missing sources become null, never omitted
- Receipt and credit note snapshots reuse the issued invoice figures
- Reader tolerates missing sections and unknown keys
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.app.services.snapshot_builder import (
    UNKNOWN_ISSUER,
    build_credit_note_snapshot,
    build_invoice_snapshot,
    build_receipt_snapshot,
    read_snapshot,
)
from src.domain.credit_note import CreditNote
from src.domain.payment import Payment
from src.domain.payment_method import PaymentMethod
from src.domain.receipt import Receipt
from src.domain.tax_schema import TaxSchema


class TestBuildInvoiceSnapshot:

    def test_sections_and_totals(self, draft_invoice, sample_business, sample_client, draft_lines):
        """
        Given: A priced draft with one line item
        When: Building its snapshot
        Then: Every section is present and money is rendered as 2-decimal strings
        """
        draft_invoice.verification_id = "5c3e8d2a-1b4f-4c6e-9a7d-2e1f0b3c4d5e"

        snapshot = build_invoice_snapshot(draft_invoice, sample_business, sample_client, draft_lines)

        assert snapshot["snapshot_version"] == 1
        assert snapshot["document_type"] == "invoice"
        assert snapshot["issuer"]["legal_name"] == "Acme Trading Ltd"
        assert snapshot["recipient"]["name"] == "Globex Corp"
        assert snapshot["totals"] == {
            "subtotal": "100.00",
            "tax_amount": "7.50",
            "discount_amount": "0.00",
            "total_amount": "107.50",
            "currency": "USD",
        }
        assert snapshot["line_items"] == [
            {
                "description": "Consulting",
                "quantity": "2",
                "unit_price": "50.00",
                "tax_rate": "7.5",
                "discount_percent": "0",
                "amount": "100.00",
                "sort_order": 0,
            }
        ]
        assert snapshot["dates"]["due_date"] == "2026-02-15"
        assert snapshot["references"]["verification_id"] == draft_invoice.verification_id

    def test_missing_sources_are_null(self, draft_invoice, sample_business):
        snapshot = build_invoice_snapshot(draft_invoice, sample_business, None, [])

        assert snapshot["recipient"] is None
        assert snapshot["payment_method"] is None
        assert snapshot["tax_schema"] is None
        assert snapshot["line_items"] == []
        assert snapshot["dates"]["issue_date"] is None

    def test_payment_method_and_tax_schema(self, draft_invoice, sample_business, sample_client, draft_lines):
        payment_method = PaymentMethod(
            business_id=sample_business.id,
            provider_type="bank_transfer",
            display_name="GTBank",
            instructions={"account_number": "0123456789"},
        )
        tax_schema = TaxSchema(name="NG VAT", version="2024.1", jurisdiction="NG", rates={"vat": "7.5"})

        snapshot = build_invoice_snapshot(
            draft_invoice, sample_business, sample_client, draft_lines, payment_method, tax_schema
        )

        assert snapshot["payment_method"]["instructions"] == {"account_number": "0123456789"}
        assert snapshot["tax_schema"]["version"] == "2024.1"

    def test_snapshot_is_detached_from_sources(self, draft_invoice, sample_business, sample_client, draft_lines):
        """
        Given: A snapshot built from a business with a nested address
        When: The business is renamed and its address edited afterwards
        Then: The snapshot still holds the original values
        """
        snapshot = build_invoice_snapshot(draft_invoice, sample_business, sample_client, draft_lines)

        sample_business.legal_name = "Renamed Ltd"
        sample_business.address["city"] = "Abuja"
        sample_client.name = "Someone Else"

        assert snapshot["issuer"]["legal_name"] == "Acme Trading Ltd"
        assert snapshot["issuer"]["address"]["city"] == "Lagos"
        assert snapshot["recipient"]["name"] == "Globex Corp"


@pytest.mark.asyncio
class TestDependentSnapshots:

    async def test_receipt_copies_issued_invoice_figures(self, issued_invoice, sample_business, sample_client):
        payment = Payment(
            invoice_id=issued_invoice.id,
            amount=Decimal("50"),
            payment_method="bank_transfer",
            payment_reference="TRX-1",
            payment_date=date(2026, 1, 20),
        )
        receipt = Receipt(
            business_id=issued_invoice.business_id,
            invoice_id=issued_invoice.id,
            payment_id=payment.id,
            currency="USD",
            total_amount=Decimal("50"),
        )
        # Live invoice total edited after issuance must not leak into the receipt
        issued_invoice.total_amount = Decimal("999.00")

        snapshot = build_receipt_snapshot(receipt, sample_business, sample_client, issued_invoice, payment)

        assert snapshot["document_type"] == "receipt"
        assert snapshot["payer"]["name"] == "Globex Corp"
        assert snapshot["invoice"]["invoice_number"] == issued_invoice.document_number
        assert snapshot["invoice"]["total_amount"] == "107.50"
        assert snapshot["payment"] == {
            "amount": "50.00",
            "payment_method": "bank_transfer",
            "payment_reference": "TRX-1",
            "payment_date": "2026-01-20",
            "notes": None,
        }
        assert snapshot["references"]["payment_id"] == payment.id

    async def test_credit_note_copies_invoice_lines(self, issued_invoice, sample_business, sample_client):
        credit_note = CreditNote(
            business_id=issued_invoice.business_id,
            original_invoice_id=issued_invoice.id,
            reason="Duplicate invoice raised",
            currency="USD",
            total_amount=issued_invoice.total_amount,
        )

        snapshot = build_credit_note_snapshot(credit_note, sample_business, sample_client, issued_invoice)

        assert snapshot["original_invoice"]["invoice_number"] == issued_invoice.document_number
        assert snapshot["line_items"] == issued_invoice.snapshot["line_items"]
        assert snapshot["line_items"] is not issued_invoice.snapshot["line_items"]
        assert snapshot["reason"] == "Duplicate invoice raised"
        assert snapshot["totals"]["total_amount"] == "107.50"


class TestReadSnapshot:

    def test_none_means_legacy(self):
        assert read_snapshot(None) is None

    def test_empty_snapshot_reads_with_defaults(self):
        snapshot = read_snapshot({})

        assert snapshot.version == 1
        assert snapshot.issuer_name == UNKNOWN_ISSUER
        assert snapshot.line_items == []
        assert snapshot.total_amount is None

    def test_issuer_name_prefers_legal_name(self):
        assert read_snapshot({"issuer": {"name": "Acme", "legal_name": None}}).issuer_name == "Acme"
        assert read_snapshot({"issuer": {"name": "Acme", "legal_name": "Acme Ltd"}}).issuer_name == "Acme Ltd"

    def test_receipt_payer_is_the_counterparty(self):
        snapshot = read_snapshot({"payer": {"name": "Globex"}})
        assert snapshot.counterparty == {"name": "Globex"}

    def test_unknown_keys_are_kept_but_ignored(self):
        snapshot = read_snapshot(
            {"snapshot_version": 3, "totals": {"total_amount": "1.00"}, "future_section": {"x": 1}}
        )
        assert snapshot.version == 3
        assert snapshot.total_amount == "1.00"
        assert snapshot.section("future_section") == {"x": 1}
