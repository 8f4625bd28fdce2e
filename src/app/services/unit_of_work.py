"""Unit of Work Interface

Transaction boundary shared by a use case and the repositories it drives.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract unit of work

    A use case commits exactly once on success; any failure rolls back
    everything flushed through the same session.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
