# quotebook/services/numbering.py
"""
Sequential document numbers: ``<PREFIX>-<year>-<seq>``, seq zero-padded to 4.

Numbers come from the ``document_counters`` row of (prefix, year), bumped
with a single UPDATE inside the caller's transaction. The row lock is held
until that transaction ends, so concurrent creates queue behind each other
and a rolled-back create gives its number back. Counters only go up:
deleting a document never frees its number.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quotebook.core.errors import ConflictError, NumberingCorruptionError
from quotebook.core.logging_config import logger
from quotebook.core.settings import settings
from quotebook.models.counter import DocumentCounter

_NUMBER_RE = re.compile(r"^(?P<prefix>[A-Z]+)-(?P<year>\d{4})-(?P<seq>\d{4,})$")


def current_year(now: Optional[datetime] = None) -> int:
    tz = ZoneInfo(settings.TIMEZONE)
    if now is None:
        return datetime.now(tz).year
    return now.astimezone(tz).year


def format_number(prefix: str, year: int, seq: int) -> str:
    return f"{prefix}-{year}-{seq:04d}"


def parse_number(value: str) -> Tuple[str, int, int]:
    m = _NUMBER_RE.match(value or "")
    if not m:
        raise NumberingCorruptionError(f"Stored document number {value!r} is not <PREFIX>-<year>-<seq>")
    return m.group("prefix"), int(m.group("year")), int(m.group("seq"))


def highest_issued(db: Session, model, prefix: str, year: int) -> int:
    """Highest sequence already present in ``model`` for (prefix, year), 0 if none."""
    numbers = db.scalars(
        select(model.quotation_number).where(
            model.quotation_number.startswith(f"{prefix}-{year}-", autoescape=True)
        )
    ).all()

    highest = 0
    for number in numbers:
        _, _, seq = parse_number(number)
        highest = max(highest, seq)
    return highest


def _is_issued(db: Session, model, number: str) -> bool:
    return db.scalar(select(model.id).where(model.quotation_number == number)) is not None


def allocate(db: Session, model, prefix: str, year: Optional[int] = None) -> str:
    """
    Reserve the next number for (prefix, year) in the current transaction.

    A missing counter row is seeded from the documents already stored, so
    rows imported before the counter existed are never handed out again.
    A counter that has fallen behind the stored documents (rows restored
    after the counter was created) is moved past the highest one.
    Two transactions seeding the same year at once collide on the counter's
    primary key; the loser gets ``ConflictError`` and should retry.
    """
    year = year or current_year()
    where = (DocumentCounter.kind == prefix, DocumentCounter.year == year)

    bumped = db.execute(
        update(DocumentCounter)
        .where(*where)
        .values(last_seq=DocumentCounter.last_seq + 1)
        .execution_options(synchronize_session=False)
    )

    if bumped.rowcount:
        seq = db.scalar(select(DocumentCounter.last_seq).where(*where))
        if _is_issued(db, model, format_number(prefix, year, seq)):
            stale = seq
            seq = highest_issued(db, model, prefix, year) + 1
            db.execute(
                update(DocumentCounter)
                .where(*where)
                .values(last_seq=seq)
                .execution_options(synchronize_session=False)
            )
            logger.warning("document_counter_resynced", kind=prefix, year=year, stale_seq=stale, next_seq=seq)
    else:
        seq = highest_issued(db, model, prefix, year) + 1
        db.add(DocumentCounter(kind=prefix, year=year, last_seq=seq))
        try:
            db.flush()
        except IntegrityError as e:
            raise ConflictError(f"Counter {prefix}-{year} was created concurrently") from e
        logger.info("document_counter_seeded", kind=prefix, year=year, first_seq=seq)

    return format_number(prefix, year, seq)
