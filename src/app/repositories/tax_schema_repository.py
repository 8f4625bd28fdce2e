"""Tax Schema Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.tax_schema import TaxSchema


class TaxSchemaRepository(ABC):
    """Repository interface for TaxSchema lookups"""

    @abstractmethod
    async def get_by_id(self, tax_schema_id: str) -> Optional[TaxSchema]:
        pass
