"""
Pytest configuration and fixtures for the Progress test suite
"""

import uuid
from datetime import datetime, timezone

import pytest

from progress import create_app
from progress.config import TestingConfig
from progress.extensions import db


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a postgrest request builder over in-memory rows."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = 'select'
        self.columns = ('*',)
        self.payload = None
        self.filters = []
        self.or_filters = []
        self.orders = []
        self.limit_count = None

    def select(self, *columns):
        self.op = 'select'
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = 'insert'
        self.payload = payload
        return self

    def update(self, payload):
        self.op = 'update'
        self.payload = payload
        return self

    def delete(self):
        self.op = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def or_(self, expression):
        self.or_filters.append(expression)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row):
        for column, value in self.filters:
            if str(row.get(column)) != str(value):
                return False
        for expression in self.or_filters:
            hit = False
            for part in expression.split(','):
                column, _, pattern = part.split('.', 2)
                needle = pattern.strip('%').lower()
                if needle in str(row.get(column) or '').lower():
                    hit = True
            if not hit:
                return False
        return True

    def execute(self):
        self.backend.calls.append(self)
        if self.backend.on_execute:
            self.backend.on_execute(self)
        failure = self.backend.failures.get(self.table)
        if failure is not None:
            raise failure

        rows = self.backend.tables.setdefault(self.table, [])
        if self.op == 'insert':
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in new_rows:
                row = {'id': str(uuid.uuid4()), 'created_at': datetime.now(timezone.utc).isoformat()}
                row.update(payload)
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)
        if self.op == 'delete':
            removed = [r for r in rows if self._matches(r)]
            self.backend.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)
        if self.op == 'update':
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        result = [dict(r) for r in rows if self._matches(r)]
        for column, desc in reversed(self.orders):
            result.sort(key=lambda r: (r.get(column) is None, r.get(column) or ''), reverse=desc)
        if self.limit_count is not None:
            result = result[:self.limit_count]
        return FakeResponse(result)


class FakeSupabase:
    """In-memory Supabase client recording every executed query."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.on_execute = None

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, error):
        self.failures[table] = error

    def calls_for(self, table, op=None):
        return [c for c in self.calls if c.table == table and (op is None or c.op == op)]


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def app(supabase):
    app = create_app(TestingConfig)
    app.extensions['supabase'] = supabase
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user through the API and return the JSON body."""
    def _register(email='owner@example.com', password='Secret123!', **extra):
        body = {'email': email, 'password': password, 'displayName': 'Owner', 'phoneNumber': '+15550100'}
        body.update(extra)
        resp = client.post('/register', json=body)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _register


@pytest.fixture
def auth_headers(register):
    data = register()
    return {'Authorization': f"Bearer {data['token']}"}


@pytest.fixture
def user_id(auth_headers, client):
    return client.get('/me', headers=auth_headers).get_json()['user']['id']
