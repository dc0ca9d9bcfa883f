import threading

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from quotebook.core.errors import ConflictError, FinalizedDocumentError
from quotebook.db import SessionLocal
from quotebook.models.counter import DocumentCounter
from quotebook.models.quotation import Quotation, QuotationItem, QuotationProgress
from quotebook.services import documents
from quotebook.services.documents import (
    POP_KIND,
    QUOTATION_KIND,
    DocumentService,
    pop_service,
    quotation_service,
)
from quotebook.services.numbering import allocate, current_year

ITEMS = [{"room_type": "kitchen", "length": 10, "width": 8, "price_per_sqft": 150, "description": "Acrylic shutters"}]


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


def _no_sleep(monkeypatch):
    real = documents.retry_on
    monkeypatch.setattr(documents, "retry_on", lambda fn, **kw: real(fn, sleep=lambda s: None, **kw))


# -------------------------
# 1) NUMBER CONFLICTS
# -------------------------
def test_number_conflict_is_retried_with_a_fresh_number(user, monkeypatch):
    year = current_year()
    with SessionLocal() as db:
        first = quotation_service.create(db, user, {"client_name": "Asha", "items": ITEMS})

    calls = []

    def clashing_then_real(db, model, prefix, year=None):
        calls.append(prefix)
        if len(calls) == 1:
            return first.quotation_number
        return allocate(db, model, prefix, year)

    monkeypatch.setattr(documents, "allocate", clashing_then_real)
    _no_sleep(monkeypatch)

    with SessionLocal() as db:
        doc = DocumentService(QUOTATION_KIND, max_attempts=3).create(db, user, {"client_name": "Ravi", "items": ITEMS})

    assert len(calls) == 2
    assert doc.quotation_number == f"QT-{year}-0002"
    with SessionLocal() as db:
        assert _count(db, Quotation) == 2
        assert _count(db, QuotationItem) == 2


def test_conflict_surfaces_after_all_attempts(user, monkeypatch):
    with SessionLocal() as db:
        first = quotation_service.create(db, user, {"client_name": "Asha", "items": ITEMS})

    monkeypatch.setattr(documents, "allocate", lambda db, model, prefix, year=None: first.quotation_number)
    _no_sleep(monkeypatch)

    with SessionLocal() as db:
        with pytest.raises(ConflictError):
            DocumentService(QUOTATION_KIND, max_attempts=3).create(
                db, user, {"client_name": "Ravi", "status": "FINALIZED", "items": ITEMS}
            )

    with SessionLocal() as db:
        assert _count(db, Quotation) == 1
        assert _count(db, QuotationItem) == 1
        assert _count(db, QuotationProgress) == 0


# -------------------------
# 2) STORAGE FAILURES
# -------------------------
def test_failed_commit_leaves_nothing_behind(client, auth_headers, monkeypatch):
    def broken_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", broken_commit)

    r = client.post(
        "/quotations",
        headers=auth_headers,
        json={"client_name": "Asha", "status": "FINALIZED", "items": ITEMS},
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}

    with SessionLocal() as db:
        assert _count(db, Quotation) == 0
        assert _count(db, QuotationItem) == 0
        assert _count(db, QuotationProgress) == 0
        assert _count(db, DocumentCounter) == 0


def test_database_error_in_a_read_is_opaque(client, auth_headers, monkeypatch):
    def broken_list(db, owner_id, status=None):
        raise OperationalError("SELECT", {}, Exception("no such table: quotations"))

    monkeypatch.setattr(quotation_service, "list", broken_list)

    r = client.get("/quotations", headers=auth_headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


# -------------------------
# 3) WRITE LOCKING
# -------------------------
def test_writes_load_the_document_with_a_row_lock():
    sql = str(quotation_service._write_query("some-id").compile(dialect=postgresql.dialect()))
    assert "FOR UPDATE" in sql


def test_concurrent_finalize_seeds_progress_once(user):
    with SessionLocal() as db:
        doc = quotation_service.create(db, user, {"client_name": "Asha", "items": ITEMS})

    n_threads = 6
    finalized, rejected, errors = [], [], []
    lock = threading.Lock()
    start = threading.Barrier(n_threads)

    def worker():
        start.wait()
        try:
            with SessionLocal() as db:
                quotation_service.update(db, user, doc.id, {"status": "FINALIZED"})
            with lock:
                finalized.append(1)
        except FinalizedDocumentError:
            with lock:
                rejected.append(1)
        except Exception as e:  # collected and asserted below
            with lock:
                errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(finalized) == 1
    assert len(rejected) == n_threads - 1
    with SessionLocal() as db:
        assert len(quotation_service.list_progress(db, user.id, doc.id)) == 1


# -------------------------
# 4) SNAPSHOT / COUNTS
# -------------------------
def test_snapshot_descriptions_come_from_the_pricer(user):
    with SessionLocal() as db:
        qt = quotation_service.create(db, user, {"client_name": "Asha", "items": ITEMS})
    with SessionLocal() as db:
        pop = pop_service.create(
            db, user, {"client_name": "Asha", "items": [{"description": "Cornice", "quantity": 4, "unit_price": 250}]}
        )

    with SessionLocal() as db:
        qt_line = quotation_service.snapshot(db, user.id, qt.id).lines[0]
        pop_line = pop_service.snapshot(db, user.id, pop.id).lines[0]

    assert (qt_line.title, qt_line.description) == ("Kitchen", "Acrylic shutters")
    assert (pop_line.title, pop_line.description) == ("Cornice", None)
    assert POP_KIND.pricer.item_description(pop_line) is None


def test_counts_per_status(user, other_user):
    with SessionLocal() as db:
        quotation_service.create(db, user, {"client_name": "A", "items": ITEMS})
    with SessionLocal() as db:
        quotation_service.create(db, user, {"client_name": "B", "status": "FINALIZED", "items": ITEMS})
    with SessionLocal() as db:
        quotation_service.create(db, other_user, {"client_name": "C", "items": ITEMS})

    with SessionLocal() as db:
        assert quotation_service.counts(db, user.id) == {"DRAFT": 1, "FINALIZED": 1, "total": 2}
        assert pop_service.counts(db, user.id) == {"DRAFT": 0, "FINALIZED": 0, "total": 0}
