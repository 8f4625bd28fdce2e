"""SQLAlchemy repositories for snapshot source records

Users, clients, payment methods and tax schemas are only read here; they
are owned and edited elsewhere in the product.
"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_profile_repository import UserProfileRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.app.repositories.tax_schema_repository import TaxSchemaRepository
from src.domain.user_profile import UserProfile
from src.domain.client import Client
from src.domain.payment_method import PaymentMethod
from src.domain.tax_schema import TaxSchema


class SqlAlchemyUserProfileRepository(UserProfileRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        statement = select(UserProfile).where(UserProfile.id == user_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()


class SqlAlchemyClientRepository(ClientRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        statement = select(Client).where(Client.id == client_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()


class SqlAlchemyPaymentMethodRepository(PaymentMethodRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payment_method_id: str) -> Optional[PaymentMethod]:
        statement = select(PaymentMethod).where(PaymentMethod.id == payment_method_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()


class SqlAlchemyTaxSchemaRepository(TaxSchemaRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tax_schema_id: str) -> Optional[TaxSchema]:
        statement = select(TaxSchema).where(TaxSchema.id == tax_schema_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
