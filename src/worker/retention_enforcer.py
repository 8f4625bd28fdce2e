"""Retention Enforcement Background Worker

Periodically deletes issued documents whose retention period has ended.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
import src.adapter.services.immutability  # noqa: F401  registers ORM guards
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyReceiptRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyAuditLogRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.notification_service import create_notification_service
from src.app.services.notification_service import NotificationService
from src.app.use_cases.documents import EnforceRetention, RetentionSweepResultDTO

logger = logging.getLogger(__name__)


class RetentionEnforcerWorker:
    """
    Background worker for the retention sweep

    Features:
    - Deletes expired invoices with their receipts, credit notes, payments and lines
    - Alerts operators when individual deletions fail
    - Can run once or continuously
    - Configurable interval (default: weekly)

    Usage:
        # Run once
        worker = RetentionEnforcerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = RetentionEnforcerWorker()
        await worker.run_forever(interval_seconds=604800)  # Weekly
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            notification_service: Alert channel for failed deletions
                (defaults to webhook from config, or logging)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.RETENTION_NOTIFICATION_WEBHOOK
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("RetentionEnforcerWorker initialized")

    async def run_once(self, today: Optional[date] = None) -> RetentionSweepResultDTO:
        """
        Run the retention sweep once

        Args:
            today: Reference date (defaults to current UTC date)

        Returns:
            RetentionSweepResultDTO with deletion counts and errors
        """
        if not ApplicationConfig.RETENTION_ENABLED:
            logger.info("Retention enforcement is disabled, skipping")
            now = datetime.utcnow()
            return RetentionSweepResultDTO(
                started_at=now,
                completed_at=now,
                deleted_counts_by_type={},
            )

        async with self.async_session_factory() as session:
            use_case = EnforceRetention(
                uow=SqlAlchemyUnitOfWork(session),
                invoice_repo=SqlAlchemyInvoiceRepository(session),
                invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
                payment_repo=SqlAlchemyPaymentRepository(session),
                receipt_repo=SqlAlchemyReceiptRepository(session),
                credit_note_repo=SqlAlchemyCreditNoteRepository(session),
                audit_repo=SqlAlchemyAuditLogRepository(session),
            )

            result = await use_case.execute(today)

            if result.is_err():
                logger.error(f"Retention sweep failed: {result.error.message}")
                raise RuntimeError(f"Retention sweep failed: {result.error.message}")

            response = result.value

            if response.errors:
                logger.error(
                    f"ALERT: {len(response.errors)} document(s) could not be deleted"
                )
                await self.notification_service.send_retention_alert(
                    response.model_dump(mode="json")
                )

            return response

    async def run_forever(self, interval_seconds: int = 604800):
        """
        Run the sweep continuously at specified interval

        Args:
            interval_seconds: Seconds between runs (default: 7 days)
        """
        logger.info(
            f"Starting continuous retention enforcement with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Retention cycle complete. "
                    f"Deleted {result.total_deleted} record(s) {result.deleted_counts_by_type}, "
                    f"deferred {result.deferred}, errors {len(result.errors)}"
                )
            except Exception as e:
                logger.error(f"Retention cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("RetentionEnforcerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.retention_enforcer --once

        # Run continuously (default: weekly)
        python -m src.worker.retention_enforcer

        # Run continuously with custom interval (in seconds)
        python -m src.worker.retention_enforcer --interval 86400
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Retention Enforcement Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RETENTION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 604800 = 7 days)"
    )
    args = parser.parse_args()

    worker = RetentionEnforcerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Retention sweep complete:")
            for document_type, count in result.deleted_counts_by_type.items():
                print(f"  {document_type}: {count} deleted")
            print(f"  Deferred: {result.deferred}")
            if result.errors:
                print("\nErrors:")
                for error in result.errors:
                    print(f"  - {error.document_type} {error.document_id}: {error.message}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
