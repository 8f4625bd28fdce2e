"""Background workers for the document service"""
from .retention_enforcer import RetentionEnforcerWorker

__all__ = ["RetentionEnforcerWorker"]
