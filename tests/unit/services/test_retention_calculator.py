"""Unit tests for RetentionCalculator

Tests cover:
- Policy lookup per jurisdiction and document type
- Fallback to the jurisdiction's invoice policy, then the default
- Leap day handling
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.retention_calculator import RetentionCalculator, add_years
from src.domain.document_status import DocumentType
from src.domain.retention_policy import RetentionPolicy


def policy_repo_with(policies):
    repo = MagicMock()
    repo.get_policy = AsyncMock(
        side_effect=lambda jurisdiction, entity_type: policies.get((jurisdiction, entity_type))
    )
    return repo


class TestAddYears:

    def test_regular_date(self):
        assert add_years(date(2026, 1, 15), 7) == date(2033, 1, 15)

    def test_leap_day_to_non_leap_year(self):
        assert add_years(date(2024, 2, 29), 7) == date(2031, 2, 28)

    def test_leap_day_to_leap_year(self):
        assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


@pytest.mark.asyncio
class TestRetentionCalculator:

    async def test_policy_for_document_type(self):
        repo = policy_repo_with({("NG", "receipt"): RetentionPolicy(jurisdiction="NG", entity_type="receipt", retention_years=6)})
        calculator = RetentionCalculator(repo)

        result = await calculator.locked_until("NG", DocumentType.RECEIPT, date(2026, 1, 15))

        assert result == date(2032, 1, 15)

    async def test_falls_back_to_invoice_policy(self):
        repo = policy_repo_with({("GB", "invoice"): RetentionPolicy(jurisdiction="GB", entity_type="invoice", retention_years=6)})
        calculator = RetentionCalculator(repo)

        assert await calculator.retention_years("GB", DocumentType.CREDIT_NOTE) == 6

    async def test_falls_back_to_default_years(self):
        calculator = RetentionCalculator(policy_repo_with({}), default_years=7)

        assert await calculator.retention_years("US", DocumentType.INVOICE) == 7

    async def test_missing_jurisdiction_uses_default_jurisdiction(self):
        repo = policy_repo_with({("NG", "invoice"): RetentionPolicy(jurisdiction="NG", entity_type="invoice", retention_years=10)})
        calculator = RetentionCalculator(repo, default_jurisdiction="NG")

        assert await calculator.retention_years(None, DocumentType.INVOICE) == 10
        repo.get_policy.assert_awaited_with("NG", "invoice")
