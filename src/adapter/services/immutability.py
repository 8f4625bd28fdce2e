"""ORM guards for issued documents and the audit trail

Registered on import. They make the write-once rules hold for every code
path that goes through the ORM, not only for the use cases:

- integrity fields of an issued invoice, receipt or credit note cannot change
- an issued document cannot be deleted before its retention date
- audit log rows can be neither updated nor deleted
"""

import logging
from datetime import datetime
from sqlalchemy import event, inspect
from src.domain.audit_log import AuditLog
from src.domain.credit_note import CreditNote
from src.domain.invoice import Invoice
from src.domain.issuable_document import INTEGRITY_FIELDS
from src.domain.receipt import Receipt

logger = logging.getLogger(__name__)


class ImmutableRecordError(Exception):
    """Raised when a flush would modify or remove a write-once record"""


def _was_issued(state) -> bool:
    history = state.attrs.issued_at.history
    if history.deleted:
        return history.deleted[0] is not None
    if history.added:
        # issued_at is being set by this flush; the row was a draft before it
        return False
    return state.obj().issued_at is not None


def guard_integrity_fields(mapper, connection, target):
    state = inspect(target)
    if not _was_issued(state):
        return

    changed = [name for name in INTEGRITY_FIELDS if state.attrs[name].history.has_changes()]
    if changed:
        logger.error(
            f"Blocked update of integrity fields {changed} on issued "
            f"{target.document_type.value} {target.id}"
        )
        raise ImmutableRecordError(
            f"Integrity fields of issued {target.document_type.value} {target.id} "
            f"cannot be changed: {', '.join(changed)}"
        )


def guard_retention_delete(mapper, connection, target):
    if target.issued_at is None:
        return

    today = datetime.utcnow().date()
    if target.retention_locked_until is None or target.retention_locked_until >= today:
        raise ImmutableRecordError(
            f"Issued {target.document_type.value} {target.id} is retained until "
            f"{target.retention_locked_until}"
        )


def reject_audit_change(mapper, connection, target):
    raise ImmutableRecordError(f"Audit log entry {target.id} is append-only")


for _model in (Invoice, Receipt, CreditNote):
    event.listen(_model, "before_update", guard_integrity_fields)
    event.listen(_model, "before_delete", guard_retention_delete)

event.listen(AuditLog, "before_update", reject_audit_change)
event.listen(AuditLog, "before_delete", reject_audit_change)
