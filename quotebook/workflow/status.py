# quotebook/workflow/status.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from quotebook.core.errors import FinalizedDocumentError, ValidationError
from quotebook.models.mixins import utcnow
from quotebook.models.quotation import Quotation, QuotationProgress
from quotebook.models.user import User


class DocumentStatus(str, Enum):
    DRAFT = "DRAFT"
    FINALIZED = "FINALIZED"


class ProgressStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


# Called inside the finalize transaction; returns True when it wrote something.
FinalizeHook = Callable[[Session, Any, User], bool]


@dataclass
class TransitionResult:
    finalized: bool = False
    progress_created: bool = False


def parse_status(value: Optional[str]) -> Optional[DocumentStatus]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return DocumentStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid status {value!r}. Expected DRAFT or FINALIZED")


def ensure_mutable(doc: Any, action: str = "edit") -> None:
    """FINALIZED documents can be neither edited nor deleted (any kind)."""
    if doc.status == DocumentStatus.FINALIZED.value:
        raise FinalizedDocumentError(f"Cannot {action} finalized quotation")


def apply_transition(
    db: Session,
    doc: Any,
    requested: Optional[DocumentStatus],
    actor: User,
    on_finalize: Optional[FinalizeHook] = None,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """
    DRAFT -> FINALIZED is the only transition. It stamps ``finalized_at`` and
    runs the kind's hook in the same unit of work. Requesting the current
    status is a no-op; nothing leads back to DRAFT.
    """
    res = TransitionResult()
    current = DocumentStatus(doc.status or DocumentStatus.DRAFT.value)

    if requested is None or requested == current:
        return res
    if current == DocumentStatus.FINALIZED:
        raise FinalizedDocumentError("Cannot edit finalized quotation")

    doc.status = DocumentStatus.FINALIZED.value
    doc.finalized_at = now or utcnow()
    res.finalized = True

    if on_finalize is not None:
        res.progress_created = bool(on_finalize(db, doc, actor))

    return res


def seed_progress(db: Session, quotation: Quotation, actor: User) -> bool:
    """Finalize hook for interior quotations: open the progress history at 0%."""
    quotation.progress.append(
        QuotationProgress(
            status=ProgressStatus.NOT_STARTED.value,
            percentage=0,
            updated_by=actor.display_name,
        )
    )
    return True


def record_progress(
    db: Session,
    quotation: Quotation,
    actor: User,
    status: str,
    percentage: Any,
    note: Optional[str] = None,
) -> QuotationProgress:
    if quotation.status != DocumentStatus.FINALIZED.value:
        raise ValidationError("Progress can only be recorded for finalized quotations")

    try:
        progress_status = ProgressStatus(str(status or "").strip().upper())
    except ValueError:
        raise ValidationError(
            f"Invalid progress status {status!r}. Expected NOT_STARTED, IN_PROGRESS or COMPLETED"
        )

    try:
        pct = int(percentage)
    except (TypeError, ValueError):
        raise ValidationError("percentage must be a whole number between 0 and 100")
    if not 0 <= pct <= 100:
        raise ValidationError("percentage must be a whole number between 0 and 100")

    entry = QuotationProgress(
        status=progress_status.value,
        percentage=pct,
        updated_by=actor.display_name,
        note=(note or "").strip() or None,
    )
    quotation.progress.insert(0, entry)
    db.add(entry)
    return entry
