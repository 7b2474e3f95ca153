"""
Shared fixtures.

FakeSupabase mimics the slice of the supabase-py query builder the services
use (table().select/insert/update/eq/in_/order/limit/execute) over in-memory
rows, including the unique constraints on users.id and users.friend_code.
"""

from types import SimpleNamespace

import pytest

from app.modules.auth.service import clear_auth_cache
from app.modules.profiles.service import ProfileService
from app.modules.profiles.store import ProfileStore, get_profile_store


class FakeResult:
    def __init__(self, data):
        self.data = data


class UniqueViolation(Exception):
    def __init__(self, column):
        super().__init__(f'duplicate key value violates unique constraint "users_{column}_key"')
        self.code = "23505"


class FakeTable:
    unique_columns = ("id", "friend_code")

    def __init__(self, name):
        self.name = name
        self.rows = []
        self.errors = {}  # op -> exception raised on the next execute of that op
        self.calls = []

    def run(self, query):
        self.calls.append((query.op, query.payload))
        if query.op in self.errors:
            raise self.errors.pop(query.op)
        if query.op == "insert":
            return self._insert(query.payload)
        matched = [r for r in self.rows if all(f(r) for f in query.filters)]
        if query.op == "update":
            return self._update(matched, query.payload)
        if query.order_by:
            column, desc = query.order_by
            matched = sorted(matched, key=lambda r: r.get(column) or 0, reverse=desc)
        if query.limit_to is not None:
            matched = matched[:query.limit_to]
        return FakeResult([self._project(r, query.columns) for r in matched])

    def _project(self, row, columns):
        if columns == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in columns.split(",")}

    def _check_unique(self, payload, skip=None):
        for column in self.unique_columns:
            value = payload.get(column)
            if value is None:
                continue
            for row in self.rows:
                if row is not skip and row.get(column) == value:
                    raise UniqueViolation(column)

    def _insert(self, payload):
        self._check_unique(payload)
        row = dict(payload)
        self.rows.append(row)
        return FakeResult([dict(row)])

    def _update(self, matched, payload):
        for row in matched:
            self._check_unique(payload, skip=row)
        for row in matched:
            row.update(payload)
        return FakeResult([dict(r) for r in matched])


class FakeQuery:
    def __init__(self, table):
        self.table = table
        self.op = "select"
        self.payload = None
        self.columns = "*"
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def execute(self):
        return self.table.run(self)


class FakeAuth:
    def __init__(self):
        self.users = {}  # email -> user
        self.tokens = {}  # token -> user
        self.get_user_calls = 0

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.users:
            raise Exception("User already registered")
        user = SimpleNamespace(
            id=f"user-{len(self.users) + 1}",
            email=email,
            user_metadata=credentials.get("options", {}).get("data", {}),
            password=credentials["password"],
        )
        self.users[email] = user
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if user is None or user.password != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{user.id}"
        self.tokens[token] = user
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token))

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        user = self.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.auth = FakeAuth()

    def table(self, name):
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return FakeQuery(self.tables[name])

    @property
    def users(self):
        self.table("users")
        return self.tables["users"]


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def store():
    return ProfileStore()


@pytest.fixture
def profile_service(supabase, store):
    return ProfileService(supabase, store)


@pytest.fixture
def seed(supabase):
    """Insert a complete profile row straight into the fake users table."""
    counter = {"n": 0}

    def _seed(user_id, steps=0, friends=None, **fields):
        counter["n"] += 1
        row = {
            "id": user_id,
            "name": fields.pop("name", user_id),
            "tier": "Bronze",
            "streak": 0,
            "weekly_goal": 20000,
            "weekly_step_count": steps,
            "friend_code": fields.pop("friend_code", f"SEED-{counter['n']:04d}-AAA"),
            "friends": list(friends or []),
            "avatar_choice": "person.crop.circle.fill",
        }
        row.update(fields)
        supabase.users.rows.append(row)
        return row

    return _seed


@pytest.fixture(autouse=True)
def reset_globals():
    clear_auth_cache()
    get_profile_store().clear()
    yield
    clear_auth_cache()
    get_profile_store().clear()
