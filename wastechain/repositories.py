"""
Repositories

Thin read/write access to each collection on top of the SQLAlchemy session,
plus a process-wide keyed lock used to serialize read-modify-write
sequences on a single record.
"""

import threading
from contextlib import contextmanager

from wastechain.extensions import db
from wastechain.models import Bin, Activity, Report, Citizen, Contractor, LedgerTransaction


class KeyedLock:
    """One re-entrant lock per key, created on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    @contextmanager
    def hold(self, key):
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
        with lock:
            yield


_record_locks = KeyedLock()


class Repository:
    """Collection access for one model keyed by ``id``.

    Writes are added to the session and flushed; committing is left to the
    service that owns the unit of work.
    """

    def __init__(self, model):
        self.model = model

    @property
    def name(self):
        return self.model.__tablename__

    def read_all(self, **filters):
        query = self.model.query
        if filters:
            query = query.filter_by(**filters)
        return query.all()

    def find_by_id(self, record_id):
        if record_id is None:
            return None
        # Always reload so a record read under a lock is never stale
        return db.session.get(self.model, record_id, populate_existing=True)

    def create(self, **fields):
        record = self.model(**fields)
        db.session.add(record)
        db.session.flush()
        return record

    def update(self, record, **fields):
        for column, value in fields.items():
            setattr(record, column, value)
        db.session.add(record)
        db.session.flush()
        return record

    def upsert(self, record_id, **fields):
        record = self.find_by_id(record_id)
        if record is None:
            return self.create(id=record_id, **fields)
        return self.update(record, **fields)

    def delete(self, record_id):
        record = self.find_by_id(record_id)
        if record is None:
            return False
        db.session.delete(record)
        db.session.flush()
        return True

    def count(self):
        return self.model.query.count()

    @contextmanager
    def locked(self, key):
        """Hold the lock for ``key`` in this collection."""
        with _record_locks.hold((self.name, key)):
            yield


bins = Repository(Bin)
activities = Repository(Activity)
reports = Repository(Report)
citizens = Repository(Citizen)
contractors = Repository(Contractor)
ledger = Repository(LedgerTransaction)
