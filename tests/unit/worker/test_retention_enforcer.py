"""Unit tests for RetentionEnforcerWorker

Tests cover:
- Worker initialization with configuration
- run_once execution of the retention sweep
- Retention disabled scenario
- Operator alert when deletions fail
- Sweep failure handling
- Shutdown and cleanup
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime

from src.worker.retention_enforcer import RetentionEnforcerWorker
from src.app.use_cases.documents.dtos import RetentionSweepResultDTO, RetentionErrorDTO


@pytest.fixture
def mock_notification_service():
    service = MagicMock()
    service.send_retention_alert = AsyncMock(return_value=True)
    return service


@pytest.fixture
def clean_sweep_result():
    """Sweep that deleted documents without errors"""
    return RetentionSweepResultDTO(
        started_at=datetime(2033, 6, 1, 2, 0, 0),
        completed_at=datetime(2033, 6, 1, 2, 0, 5),
        deleted_counts_by_type={"invoice": 3, "receipt": 2, "credit_note": 0, "payment": 2, "invoice_line": 6},
    )


@pytest.fixture
def failed_sweep_result():
    """Sweep where one invoice could not be deleted"""
    return RetentionSweepResultDTO(
        started_at=datetime(2033, 6, 1, 2, 0, 0),
        completed_at=datetime(2033, 6, 1, 2, 0, 5),
        deleted_counts_by_type={"invoice": 1, "receipt": 0, "credit_note": 0, "payment": 0, "invoice_line": 1},
        errors=[RetentionErrorDTO(document_type="invoice", document_id="inv-1", message="lock timeout")],
    )


def session_factory():
    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=mock_session)


def use_case_returning(value=None, error=None):
    mock_result = MagicMock()
    mock_result.is_err.return_value = error is not None
    mock_result.value = value
    mock_result.error = error
    mock_use_case = MagicMock()
    mock_use_case.execute = AsyncMock(return_value=mock_result)
    return mock_use_case


class TestRetentionEnforcerWorkerInit:
    """Test worker initialization"""

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config, mock_notification_service):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses defaults from ApplicationConfig
        """
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.return_value = MagicMock()

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)

        assert worker.db_uri == "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.assert_called_once()

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.create_async_engine")
    def test_defaults_to_logging_notifications(self, mock_create_engine, mock_app_config):
        from src.adapter.services.notification_service import LoggingNotificationService

        mock_app_config.RETENTION_NOTIFICATION_WEBHOOK = None
        mock_create_engine.return_value = MagicMock()

        worker = RetentionEnforcerWorker(db_uri="sqlite+aiosqlite:///:memory:")

        assert isinstance(worker.notification_service, LoggingNotificationService)


@pytest.mark.asyncio
class TestRetentionEnforcerWorkerRunOnce:
    """Test run_once execution"""

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.EnforceRetention")
    @patch("src.worker.retention_enforcer.SqlAlchemyUnitOfWork")
    @patch("src.worker.retention_enforcer.create_async_engine")
    @patch("src.worker.retention_enforcer.sessionmaker")
    async def test_run_once_executes_sweep(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_use_case_class,
        mock_app_config,
        clean_sweep_result,
        mock_notification_service,
    ):
        """
        Given: Retention is enabled
        When: run_once is called
        Then: Executes the sweep and returns its summary without alerting
        """
        mock_app_config.RETENTION_ENABLED = True
        mock_sessionmaker.return_value = session_factory()
        mock_create_engine.return_value = MagicMock()
        mock_use_case = use_case_returning(value=clean_sweep_result)
        mock_use_case_class.return_value = mock_use_case

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)
        result = await worker.run_once()

        assert result.total_deleted == 13
        mock_use_case.execute.assert_awaited_once()
        mock_notification_service.send_retention_alert.assert_not_called()

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.create_async_engine")
    async def test_run_once_skips_when_disabled(self, mock_create_engine, mock_app_config, mock_notification_service):
        """
        Given: Retention enforcement is disabled
        When: run_once is called
        Then: Returns an empty summary without touching the database
        """
        mock_app_config.RETENTION_ENABLED = False
        mock_create_engine.return_value = MagicMock()

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)
        result = await worker.run_once()

        assert result.total_deleted == 0
        assert result.errors == []

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.EnforceRetention")
    @patch("src.worker.retention_enforcer.SqlAlchemyUnitOfWork")
    @patch("src.worker.retention_enforcer.create_async_engine")
    @patch("src.worker.retention_enforcer.sessionmaker")
    async def test_run_once_alerts_on_errors(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_use_case_class,
        mock_app_config,
        failed_sweep_result,
        mock_notification_service,
    ):
        """
        Given: A sweep where one deletion failed
        When: run_once is called
        Then: Operators receive an alert carrying the error list
        """
        mock_app_config.RETENTION_ENABLED = True
        mock_sessionmaker.return_value = session_factory()
        mock_create_engine.return_value = MagicMock()
        mock_use_case_class.return_value = use_case_returning(value=failed_sweep_result)

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)
        await worker.run_once()

        mock_notification_service.send_retention_alert.assert_awaited_once()
        summary = mock_notification_service.send_retention_alert.await_args.args[0]
        assert summary["errors"][0]["document_id"] == "inv-1"

    @patch("src.worker.retention_enforcer.ApplicationConfig")
    @patch("src.worker.retention_enforcer.EnforceRetention")
    @patch("src.worker.retention_enforcer.SqlAlchemyUnitOfWork")
    @patch("src.worker.retention_enforcer.create_async_engine")
    @patch("src.worker.retention_enforcer.sessionmaker")
    async def test_run_once_raises_on_sweep_failure(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_use_case_class,
        mock_app_config,
        mock_notification_service,
    ):
        mock_app_config.RETENTION_ENABLED = True
        mock_sessionmaker.return_value = session_factory()
        mock_create_engine.return_value = MagicMock()
        error = MagicMock()
        error.message = "Retention sweep failed"
        mock_use_case_class.return_value = use_case_returning(error=error)

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)

        with pytest.raises(RuntimeError, match="Retention sweep failed"):
            await worker.run_once()


@pytest.mark.asyncio
class TestRetentionEnforcerWorkerShutdown:

    @patch("src.worker.retention_enforcer.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_notification_service):
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = RetentionEnforcerWorker(notification_service=mock_notification_service)
        await worker.shutdown()

        mock_engine.dispose.assert_awaited_once()
