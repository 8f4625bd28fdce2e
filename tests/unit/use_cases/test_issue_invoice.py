"""Unit tests for IssueInvoice use case

Tests cover:
- Successful issuance populates every integrity field and audits once
- Second issue call fails with ALREADY_ISSUED and changes nothing
- Access, identity and not-found checks
- Sequence conflicts and unexpected errors roll back
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.repositories.document_sequence_repository import SequenceConflictError
from src.app.services.document_hasher import canonical_fields_for, verify_document_hash
from src.app.services.document_issuer import DocumentIssuer
from src.app.services.retention_calculator import RetentionCalculator
from src.app.use_cases.documents.dtos import IssueInvoiceCommandDTO
from src.app.use_cases.documents.issue_invoice import IssueInvoice
from src.domain.audit_log import AuditEventType
from src.domain.business import BusinessMember, BusinessRole
from src.domain.invoice import InvoiceStatus
from src.domain.user_profile import UserProfile


@pytest.fixture
def mock_invoice_repo(draft_invoice):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=draft_invoice)
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    return repo


@pytest.fixture
def mock_invoice_line_repo(draft_lines):
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=draft_lines)
    return repo


@pytest.fixture
def mock_user_repo(verified_user):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=verified_user)
    return repo


@pytest.fixture
def mock_reference_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def make_use_case(
    mock_uow,
    mock_invoice_repo,
    mock_invoice_line_repo,
    mock_business_repo,
    mock_user_repo,
    mock_client_repo,
    mock_reference_repo,
    mock_audit_repo,
    issuer,
):
    def factory(**overrides):
        kwargs = dict(
            uow=mock_uow,
            invoice_repo=mock_invoice_repo,
            invoice_line_repo=mock_invoice_line_repo,
            business_repo=mock_business_repo,
            user_repo=mock_user_repo,
            client_repo=mock_client_repo,
            payment_method_repo=mock_reference_repo,
            tax_schema_repo=mock_reference_repo,
            audit_repo=mock_audit_repo,
            issuer=issuer,
        )
        kwargs.update(overrides)
        return IssueInvoice(**kwargs)

    return factory


@pytest.fixture
def command(draft_invoice, verified_user):
    return IssueInvoiceCommandDTO(invoice_id=draft_invoice.id, actor_id=verified_user.id)


@pytest.mark.asyncio
class TestIssueInvoiceSuccess:

    async def test_issue_draft(self, make_use_case, command, draft_invoice, mock_uow, mock_audit_repo):
        """
        Given: A draft invoice and a verified owner
        When: The invoice is issued
        Then: Status is issued, integrity fields are set, one audit entry is written, commit happens once
        """
        result = await make_use_case().execute(command)

        assert result.is_ok()
        response = result.value
        assert response.document_type == "invoice"
        assert response.status == "issued"
        assert response.document_number.startswith("INV-")
        assert response.verification_id == draft_invoice.verification_id
        assert response.document_hash == draft_invoice.document_hash
        assert response.retention_locked_until is not None

        assert draft_invoice.status == InvoiceStatus.ISSUED
        assert draft_invoice.issue_date is not None
        assert verify_document_hash(canonical_fields_for(draft_invoice), draft_invoice.document_hash)

        mock_audit_repo.create.assert_awaited_once()
        audit_entry = mock_audit_repo.create.await_args.args[0]
        assert audit_entry.event_type == AuditEventType.INVOICE_ISSUED
        assert audit_entry.entity_id == draft_invoice.id
        assert audit_entry.new_state["document_hash"] == draft_invoice.document_hash
        mock_uow.commit.assert_awaited_once()

    async def test_snapshot_holds_issuer_and_recipient(self, make_use_case, command, draft_invoice):
        await make_use_case().execute(command)

        assert draft_invoice.snapshot["issuer"]["legal_name"] == "Acme Trading Ltd"
        assert draft_invoice.snapshot["recipient"]["name"] == "Globex Corp"
        assert draft_invoice.snapshot["line_items"][0]["description"] == "Consulting"

    async def test_unverified_allowed_when_not_required(self, make_use_case, command, mock_user_repo):
        mock_user_repo.get_by_id = AsyncMock(return_value=None)

        result = await make_use_case(require_verified_email=False).execute(command)

        assert result.is_ok()


@pytest.mark.asyncio
class TestIssueInvoiceErrors:

    async def test_second_issue_is_rejected(self, make_use_case, command, draft_invoice, mock_uow, mock_audit_repo):
        """
        Given: An invoice that was just issued
        When: Issue is called again
        Then: ALREADY_ISSUED is returned and number, hash and verification id are unchanged
        """
        use_case = make_use_case()
        await use_case.execute(command)
        before = (
            draft_invoice.document_number,
            draft_invoice.document_hash,
            draft_invoice.verification_id,
            draft_invoice.issued_at,
        )

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "ALREADY_ISSUED"
        assert (
            draft_invoice.document_number,
            draft_invoice.document_hash,
            draft_invoice.verification_id,
            draft_invoice.issued_at,
        ) == before
        assert mock_audit_repo.create.await_count == 1
        assert mock_uow.commit.await_count == 1

    async def test_invoice_not_found(self, make_use_case, command, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "DOCUMENT_NOT_FOUND"

    async def test_non_member_is_denied(self, make_use_case, command, mock_business_repo, draft_invoice):
        mock_business_repo.get_membership = AsyncMock(return_value=None)

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "ACCESS_DENIED"
        assert draft_invoice.document_number is None

    async def test_viewer_is_denied(self, make_use_case, command, mock_business_repo, draft_invoice):
        mock_business_repo.get_membership = AsyncMock(
            return_value=BusinessMember(business_id=draft_invoice.business_id, user_id="viewer", role=BusinessRole.VIEWER)
        )

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "ACCESS_DENIED"

    async def test_unverified_email_is_rejected(self, make_use_case, command, mock_user_repo, draft_invoice):
        mock_user_repo.get_by_id = AsyncMock(
            return_value=UserProfile(id=command.actor_id, email="new@acme.example", email_verified=False)
        )

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "IDENTITY_NOT_VERIFIED"
        assert draft_invoice.is_issued is False

    async def test_voided_invoice_cannot_be_issued(self, make_use_case, command, draft_invoice):
        draft_invoice.status = InvoiceStatus.VOIDED

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "ALREADY_ISSUED"

    async def test_sequence_conflict(self, make_use_case, command, mock_uow, mock_policy_repo, draft_invoice):
        sequence_repo = MagicMock()
        sequence_repo.allocate = AsyncMock(side_effect=SequenceConflictError("busy"))
        issuer = DocumentIssuer(sequence_repo, RetentionCalculator(mock_policy_repo))

        result = await make_use_case(issuer=issuer).execute(command)

        assert result.is_err()
        assert result.error.code == "SEQUENCE_CONFLICT"
        mock_uow.rollback.assert_awaited_once()
        assert draft_invoice.status == InvoiceStatus.DRAFT

    async def test_audit_failure_rolls_back(self, make_use_case, command, mock_uow, mock_audit_repo):
        mock_audit_repo.create = AsyncMock(side_effect=Exception("audit table locked"))

        result = await make_use_case().execute(command)

        assert result.is_err()
        assert result.error.code == "ISSUE_INVOICE_FAILED"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()
