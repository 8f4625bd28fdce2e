import asyncio
import pytest
import pytest_asyncio
from datetime import datetime, date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.business import Business, BusinessMember, BusinessRole
from src.domain.client import Client
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.user_profile import UserProfile
from src.app.services.document_issuer import DocumentIssuer
from src.app.services.retention_calculator import RetentionCalculator
from src.app.services.snapshot_builder import build_invoice_snapshot

BUSINESS_ID = "b7a1c2d3-0000-4000-8000-000000000001"
CLIENT_ID = "c1d2e3f4-0000-4000-8000-000000000001"
ACTOR_ID = "u1a2b3c4-0000-4000-8000-000000000001"


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_audit_repo():
    """Mock audit log repository that echoes created entries"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda entry: entry)
    return repo


@pytest.fixture
def sample_business():
    return Business(
        id=BUSINESS_ID,
        name="Acme",
        legal_name="Acme Trading Ltd",
        tax_id="TIN-778812",
        jurisdiction="NG",
        document_prefix="INV",
        address={"line1": "12 Marina", "city": "Lagos"},
    )


@pytest.fixture
def sample_client():
    return Client(
        id=CLIENT_ID,
        business_id=BUSINESS_ID,
        name="Globex Corp",
        email="ap@globex.example",
    )


@pytest.fixture
def owner_membership():
    return BusinessMember(business_id=BUSINESS_ID, user_id=ACTOR_ID, role=BusinessRole.OWNER)


@pytest.fixture
def verified_user():
    return UserProfile(id=ACTOR_ID, email="owner@acme.example", email_verified=True)


@pytest.fixture
def mock_business_repo(sample_business, owner_membership):
    """Business repository where the actor owns the business"""
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_business)
    repo.get_membership = AsyncMock(return_value=owner_membership)
    return repo


@pytest.fixture
def mock_client_repo(sample_client):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_client)
    return repo


@pytest.fixture
def draft_invoice():
    """Draft invoice of 107.50 USD"""
    return Invoice(
        id="0b6f0f7e-59b5-4a4f-8b52-0b1f8c1d9c11",
        business_id=BUSINESS_ID,
        client_id=CLIENT_ID,
        status=InvoiceStatus.DRAFT,
        currency="USD",
        subtotal=Decimal("100.00"),
        tax_amount=Decimal("7.50"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal("107.50"),
        amount_paid=Decimal("0.00"),
        due_date=date(2026, 2, 15),
        created_at=datetime(2026, 1, 10, 9, 0, 0),
        updated_at=datetime(2026, 1, 10, 9, 0, 0),
    )


@pytest.fixture
def draft_lines(draft_invoice):
    return [
        InvoiceLine(
            invoice_id=draft_invoice.id,
            description="Consulting",
            quantity=Decimal("2"),
            unit_price=Decimal("50.00"),
            tax_rate=Decimal("7.5"),
            discount_percent=Decimal("0"),
            amount=Decimal("100.00"),
            sort_order=0,
            created_at=datetime(2026, 1, 10, 9, 0, 0),
        )
    ]


class InMemorySequenceRepository:
    """Sequence repository backed by a dict, serialized with an asyncio lock"""

    def __init__(self):
        self.values = {}
        self.lock = asyncio.Lock()

    async def allocate(self, business_id, document_type, scope):
        async with self.lock:
            key = (business_id, document_type, scope)
            current = self.values.get(key, 1)
            # Yield while holding the lock so concurrent callers interleave
            await asyncio.sleep(0)
            self.values[key] = current + 1
            return current


@pytest.fixture
def sequence_repo():
    return InMemorySequenceRepository()


@pytest.fixture
def mock_policy_repo():
    """Retention policy repository with no configured policies"""
    repo = MagicMock()
    repo.get_policy = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def issuer(sequence_repo, mock_policy_repo):
    return DocumentIssuer(sequence_repo, RetentionCalculator(mock_policy_repo, default_years=7))


@pytest_asyncio.fixture
async def issued_invoice(issuer, draft_invoice, draft_lines, sample_business, sample_client):
    """Invoice issued on 2026-01-15 10:00 UTC"""
    draft_invoice.issue_date = date(2026, 1, 15)
    await issuer.issue(
        draft_invoice,
        lambda document: build_invoice_snapshot(document, sample_business, sample_client, draft_lines),
        business_prefix="INV",
        jurisdiction="NG",
        actor_id=ACTOR_ID,
        issued_at=datetime(2026, 1, 15, 10, 0, 0),
    )
    draft_invoice.status = InvoiceStatus.ISSUED
    return draft_invoice
