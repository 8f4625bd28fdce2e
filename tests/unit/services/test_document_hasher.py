"""Unit tests for the document hash

Tests cover:
- Determinism for identical canonical fields
- Key order and amount formatting do not change the hash
- Any change to a covered field changes the hash
- Constant-time verification helper
- Canonical fields drawn from the snapshot, with legacy fallback
"""

from datetime import datetime, timezone, timedelta
from decimal import Decimal

import pytest

from src.app.services.document_hasher import (
    CanonicalFields,
    canonical_fields_for,
    canonical_json,
    compute_document_hash,
    normalize_amount,
    normalize_timestamp,
    verify_document_hash,
)
from src.domain.invoice import Invoice


@pytest.fixture
def fields():
    return CanonicalFields(
        document_type="invoice",
        document_number="INV-2026-000001",
        currency="USD",
        issued_at=datetime(2026, 1, 15, 10, 0, 0),
        amounts={"subtotal": "100.00", "tax_amount": "7.50", "total_amount": "107.50"},
        references={"document_id": "doc-1", "business_id": "biz-1", "verification_id": "v-1"},
    )


class TestComputeDocumentHash:

    def test_same_fields_same_hash(self, fields):
        """
        Given: Two identical sets of canonical fields
        When: Hashing both
        Then: Digests are equal, lowercase hex, 64 characters
        """
        first = compute_document_hash(fields)
        second = compute_document_hash(CanonicalFields(**fields.__dict__))

        assert first == second
        assert len(first) == 64
        assert first == first.lower()
        int(first, 16)

    def test_dict_order_does_not_matter(self, fields):
        reordered = CanonicalFields(
            document_type=fields.document_type,
            document_number=fields.document_number,
            currency=fields.currency,
            issued_at=fields.issued_at,
            amounts=dict(reversed(list(fields.amounts.items()))),
            references=dict(reversed(list(fields.references.items()))),
        )
        assert compute_document_hash(reordered) == compute_document_hash(fields)

    def test_amount_representation_does_not_matter(self, fields):
        as_decimals = CanonicalFields(
            **{**fields.__dict__, "amounts": {
                "subtotal": Decimal("100"),
                "tax_amount": Decimal("7.5"),
                "total_amount": Decimal("107.500"),
            }}
        )
        assert compute_document_hash(as_decimals) == compute_document_hash(fields)

    @pytest.mark.parametrize(
        "change",
        [
            {"document_number": "INV-2026-000002"},
            {"currency": "EUR"},
            {"issued_at": datetime(2026, 1, 15, 10, 0, 1)},
            {"amounts": {"subtotal": "100.00", "tax_amount": "7.50", "total_amount": "107.51"}},
            {"references": {"document_id": "doc-2", "business_id": "biz-1", "verification_id": "v-1"}},
        ],
    )
    def test_changing_a_covered_field_changes_hash(self, fields, change):
        tampered = CanonicalFields(**{**fields.__dict__, **change})
        assert compute_document_hash(tampered) != compute_document_hash(fields)

    def test_aware_and_naive_utc_timestamps_agree(self, fields):
        aware = CanonicalFields(
            **{**fields.__dict__, "issued_at": datetime(2026, 1, 15, 11, 0, 0, tzinfo=timezone(timedelta(hours=1)))}
        )
        assert compute_document_hash(aware) == compute_document_hash(fields)


class TestVerifyDocumentHash:

    def test_matching_hash(self, fields):
        assert verify_document_hash(fields, compute_document_hash(fields)) is True

    def test_uppercase_stored_hash_still_matches(self, fields):
        assert verify_document_hash(fields, compute_document_hash(fields).upper()) is True

    @pytest.mark.parametrize("stored", [None, "", "abc", "0" * 64, 12345])
    def test_mismatch_or_malformed(self, fields, stored):
        assert verify_document_hash(fields, stored) is False


class TestNormalization:

    def test_normalize_amount_rounds_half_up(self):
        assert normalize_amount(Decimal("2.675")) == "2.68"
        assert normalize_amount(10) == "10.00"
        assert normalize_amount(None) is None

    def test_normalize_amount_rejects_garbage(self):
        with pytest.raises(ValueError):
            normalize_amount("ten dollars")

    def test_normalize_timestamp_keeps_microseconds(self):
        assert normalize_timestamp(datetime(2026, 1, 15, 10, 0, 0)) == "2026-01-15T10:00:00.000000Z"

    def test_canonical_json_is_compact_and_sorted(self):
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


@pytest.mark.asyncio
class TestCanonicalFieldsFor:

    async def test_uses_snapshot_totals_and_references(self, issued_invoice):
        canonical = canonical_fields_for(issued_invoice)

        assert canonical.document_type == "invoice"
        assert canonical.document_number == issued_invoice.document_number
        assert "currency" not in canonical.amounts
        assert canonical.amounts["total_amount"] == "107.50"
        assert canonical.references["verification_id"] == issued_invoice.verification_id

    async def test_live_fields_outside_the_hash_do_not_matter(self, issued_invoice):
        """
        Given: An issued invoice
        When: Operational fields (status, amount_paid, notes) change
        Then: The stored hash still verifies
        """
        issued_invoice.amount_paid = Decimal("50.00")
        issued_invoice.notes = "Edited after issue"

        assert verify_document_hash(canonical_fields_for(issued_invoice), issued_invoice.document_hash)

    async def test_tampered_snapshot_total_fails_verification(self, issued_invoice):
        issued_invoice.snapshot = {
            **issued_invoice.snapshot,
            "totals": {**issued_invoice.snapshot["totals"], "total_amount": "1.00"},
        }
        assert not verify_document_hash(canonical_fields_for(issued_invoice), issued_invoice.document_hash)

    async def test_tampered_snapshot_currency_fails_verification(self, issued_invoice):
        """
        Given: An issued invoice in USD
        When: The currency in its snapshot totals is rewritten
        Then: The currency shown on verification no longer matches the hash
        """
        issued_invoice.snapshot = {
            **issued_invoice.snapshot,
            "totals": {**issued_invoice.snapshot["totals"], "currency": "EUR"},
        }

        assert canonical_fields_for(issued_invoice).currency == "EUR"
        assert not verify_document_hash(canonical_fields_for(issued_invoice), issued_invoice.document_hash)

    async def test_legacy_document_without_snapshot(self):
        legacy = Invoice(
            id="legacy-1",
            business_id="biz-1",
            document_number="INV-2019-000001",
            currency="USD",
            total_amount=Decimal("10"),
            issued_at=datetime(2019, 3, 1, 12, 0, 0),
            verification_id="v-legacy",
        )
        canonical = canonical_fields_for(legacy)

        assert canonical.amounts == {"total_amount": Decimal("10")}
        assert canonical.references == {
            "document_id": "legacy-1",
            "business_id": "biz-1",
            "verification_id": "v-legacy",
        }
