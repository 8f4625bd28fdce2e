"""Integration tests for the ORM write-once guards

Tests cover:
- Integrity fields of issued documents cannot be updated
- Operational fields of issued documents can still change
- Drafts stay fully editable
- Issued documents cannot be deleted before their retention date
- Audit log rows can be neither updated nor deleted
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.immutability import ImmutableRecordError
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.invoice import Invoice, InvoiceStatus


def make_issued_invoice(business_id: str, retention_locked_until: date, number: str = "INV-2026-000001") -> Invoice:
    return Invoice(
        business_id=business_id,
        status=InvoiceStatus.ISSUED,
        total_amount=Decimal("107.50"),
        currency="USD",
        document_number=number,
        issued_at=datetime(2026, 1, 15, 10, 0, 0),
        document_hash="a" * 64,
        verification_id="5c3e8d2a-1b4f-4c6e-9a7d-2e1f0b3c4d5e",
        retention_locked_until=retention_locked_until,
        snapshot={"version": 1},
        snapshot_version=1,
    )


@pytest.mark.asyncio
class TestIssuedDocumentGuards:

    async def test_hash_cannot_be_rewritten(self, db_session: AsyncSession, seed):
        """
        Given: An issued invoice in the database
        When: Its document_hash is changed and flushed
        Then: ImmutableRecordError is raised and the stored hash is unchanged
        """
        invoice = make_issued_invoice(seed.business.id, date(2033, 1, 15))
        db_session.add(invoice)
        await db_session.commit()

        invoice.document_hash = "b" * 64
        with pytest.raises(ImmutableRecordError, match="document_hash"):
            await db_session.flush()
        await db_session.rollback()

        await db_session.refresh(invoice)
        assert invoice.document_hash == "a" * 64

    async def test_snapshot_and_total_cannot_be_rewritten(self, db_session: AsyncSession, seed):
        invoice = make_issued_invoice(seed.business.id, date(2033, 1, 15))
        db_session.add(invoice)
        await db_session.commit()

        invoice.total_amount = Decimal("1.00")
        invoice.snapshot = {"version": 1, "issuer": {"legal_name": "Someone Else"}}
        with pytest.raises(ImmutableRecordError):
            await db_session.flush()
        await db_session.rollback()

    async def test_operational_fields_can_change(self, db_session: AsyncSession, seed):
        invoice = make_issued_invoice(seed.business.id, date(2033, 1, 15))
        db_session.add(invoice)
        await db_session.commit()

        invoice.status = InvoiceStatus.PAID
        invoice.amount_paid = Decimal("107.50")
        db_session.add(invoice)
        await db_session.commit()

        await db_session.refresh(invoice)
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.amount_paid == Decimal("107.50")

    async def test_draft_is_editable(self, db_session: AsyncSession, seed):
        draft = Invoice(business_id=seed.business.id, total_amount=Decimal("10.00"))
        db_session.add(draft)
        await db_session.commit()

        draft.total_amount = Decimal("20.00")
        draft.currency = "EUR"
        db_session.add(draft)
        await db_session.commit()

        await db_session.refresh(draft)
        assert draft.total_amount == Decimal("20.00")
        assert draft.currency == "EUR"

    async def test_retained_document_cannot_be_deleted(self, db_session: AsyncSession, seed):
        invoice = make_issued_invoice(seed.business.id, date(2099, 1, 1))
        db_session.add(invoice)
        await db_session.commit()
        invoice_id = invoice.id

        await db_session.delete(invoice)
        with pytest.raises(ImmutableRecordError, match="retained until"):
            await db_session.flush()
        await db_session.rollback()

        assert await db_session.get(Invoice, invoice_id) is not None

    async def test_expired_document_can_be_deleted(self, db_session: AsyncSession, seed):
        invoice = make_issued_invoice(seed.business.id, date(2020, 1, 1))
        db_session.add(invoice)
        await db_session.commit()
        invoice_id = invoice.id

        await db_session.delete(invoice)
        await db_session.commit()

        assert await db_session.get(Invoice, invoice_id) is None


@pytest.mark.asyncio
class TestAuditLogGuards:

    async def _stored_entry(self, db_session: AsyncSession, seed) -> AuditLog:
        entry = AuditLog(
            event_type=AuditEventType.INVOICE_CREATED,
            entity_type="invoice",
            entity_id="0b6f0f7e-59b5-4a4f-8b52-0b1f8c1d9c11",
            actor_id=seed.owner.id,
            business_id=seed.business.id,
            new_state={"status": "draft"},
        )
        db_session.add(entry)
        await db_session.commit()
        return entry

    async def test_audit_entry_cannot_be_updated(self, db_session: AsyncSession, seed):
        entry = await self._stored_entry(db_session, seed)

        entry.new_state = {"status": "issued"}
        with pytest.raises(ImmutableRecordError, match="append-only"):
            await db_session.flush()
        await db_session.rollback()

    async def test_audit_entry_cannot_be_deleted(self, db_session: AsyncSession, seed):
        entry = await self._stored_entry(db_session, seed)
        entry_id = entry.id

        await db_session.delete(entry)
        with pytest.raises(ImmutableRecordError, match="append-only"):
            await db_session.flush()
        await db_session.rollback()

        assert await db_session.get(AuditLog, entry_id) is not None
