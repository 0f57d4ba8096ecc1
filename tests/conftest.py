"""
Shared fixtures: an in-memory stand-in for the Supabase client.

The fake implements just the slice of the postgrest builder and storage API
the repositories use, and records every write so tests can assert on them.
"""

import copy
from datetime import datetime
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from chapel.api import ChurchAPI, reset_api
from chapel.db.client import SupabaseClient, reset_clients
from chapel.sync.bus import EventBus, reset_event_bus


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query over one in-memory table."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.operation = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.row_limit = None
        self.want_single = False
        self.count = None
        self.head = False
        self.on_conflict = None

    # Operations
    def select(self, *columns, count=None, head=False):
        self.operation = "select"
        self.count = count
        self.head = head
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def upsert(self, data, on_conflict=None):
        self.operation = "upsert"
        self.payload = data
        self.on_conflict = on_conflict
        return self

    # Modifiers
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def single(self):
        self.want_single = True
        return self

    def _matching(self):
        rows = self.backend.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.backend.calls.append((self.table, self.operation))
        if self.backend.fail_with is not None:
            raise self.backend.fail_with

        rows = self.backend.tables.setdefault(self.table, [])

        if self.operation == "insert":
            self.backend.writes.append((self.table, "insert", copy.deepcopy(self.payload)))
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = {"id": str(uuid4()), "created_at": datetime.utcnow().isoformat(), **item}
                rows.append(row)
                created.append(copy.deepcopy(row))
            return FakeResponse([] if self.backend.hide_inserted_rows else created)

        if self.operation == "upsert":
            self.backend.writes.append((self.table, "upsert", copy.deepcopy(self.payload)))
            key = self.on_conflict or "id"
            for row in rows:
                if row.get(key) == self.payload.get(key):
                    row.update(self.payload)
                    return FakeResponse([copy.deepcopy(row)])
            rows.append(dict(self.payload))
            return FakeResponse([copy.deepcopy(self.payload)])

        matched = self._matching()

        if self.operation == "update":
            self.backend.writes.append((self.table, "update", copy.deepcopy(self.payload)))
            for row in matched:
                row.update(self.payload)
            return FakeResponse([copy.deepcopy(row) for row in matched])

        if self.operation == "delete":
            self.backend.writes.append((self.table, "delete", None))
            self.backend.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([copy.deepcopy(row) for row in matched])

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        count = len(matched) if self.count == "exact" else None
        if self.head:
            return FakeResponse([], count)

        if self.want_single:
            if len(matched) != 1:
                raise APIError({
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "details": f"The result contains {len(matched)} rows",
                    "hint": None,
                })
            return FakeResponse(copy.deepcopy(matched[0]), count)
        return FakeResponse([copy.deepcopy(row) for row in matched], count)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.calls.append(("upload", self.name, path))
        self.storage.objects[(self.name, path)] = (file, file_options)
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path):
        return f"https://project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.storage.calls.append(("remove", self.name, list(paths)))
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return [{"name": path} for path in paths]


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.calls = []

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """Stands in for supabase.Client."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.writes = []
        self.storage = FakeStorage()
        self.fail_with = None
        # Mimics RLS allowing an insert but hiding the returned row.
        self.hide_inserted_rows = False

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_clients()
    reset_event_bus()
    reset_api()
    yield
    reset_clients()
    reset_event_bus()
    reset_api()


@pytest.fixture
def backend():
    return FakeSupabase()


@pytest.fixture
def client(backend):
    return SupabaseClient(backend)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def received(bus):
    """Every event published on the test bus, in order."""
    events = []
    bus.subscribe_all(events.append)
    return events


@pytest.fixture
def api(client, bus):
    return ChurchAPI(client=client, bus=bus, image_bucket="images")
