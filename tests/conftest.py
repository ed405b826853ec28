"""Pytest fixtures: in-memory stand-ins for the storage interfaces."""

import pytest

from coffee_fund.db.repository import Database, ProductRepository
from coffee_fund.deps import build_message_handler
from coffee_fund.errors import StorageError
from coffee_fund.models.schemas import Balance, LedgerEntry, Product, User


class FakeCatalog:
    def __init__(self, products=None, fail=False):
        self.products = {p.identifier: p for p in products or []}
        self.fail = fail
        self.lookups: list[str] = []

    def get(self, identifier):
        self.lookups.append(identifier)
        if self.fail:
            raise StorageError("catalog down")
        return self.products.get(identifier)

    def get_all(self):
        if self.fail:
            raise StorageError("catalog down")
        return list(self.products.values())


class FakeUsers:
    def __init__(self, fail=False):
        self.users: dict[str, User] = {}
        self.fail = fail

    def upsert(self, user):
        if self.fail:
            raise StorageError("users down")
        self.users[user.id] = user


class FakeLedgerStore:
    def __init__(self, users: FakeUsers | None = None, fail_append=False, fail_aggregate=False):
        self.entries: list[LedgerEntry] = []
        self.users = users
        self.fail_append = fail_append
        self.fail_aggregate = fail_aggregate

    def append(self, entry):
        if self.fail_append:
            raise StorageError("ledger down")
        self.entries.append(entry)

    def aggregate(self):
        if self.fail_aggregate:
            raise StorageError("ledger down")
        names = {u.id: u.name for u in self.users.users.values()} if self.users else {}
        totals = {user_id: 0 for user_id in names}
        for entry in self.entries:
            totals[entry.user_id] = totals.get(entry.user_id, 0) + entry.amount
        return [
            Balance(user_id=user_id, name=names.get(user_id, user_id), amount=amount)
            for user_id, amount in totals.items()
        ]


@pytest.fixture
def coffee() -> Product:
    return Product(identifier="coffee", name="Coffee", price=120)


@pytest.fixture
def products(coffee) -> list[Product]:
    return [
        coffee,
        Product(identifier="tea", name="Tea", price=80),
        Product(identifier="list", name="Shopping list", price=1),
    ]


@pytest.fixture
def alice() -> User:
    return User(id="1001", name="Alice")


@pytest.fixture
def bob() -> User:
    return User(id="1002", name="Bob")


@pytest.fixture
def database():
    db = Database(None)
    yield db
    db.close()


@pytest.fixture
def handler(database, products):
    ProductRepository(database).replace_all(products)
    return build_message_handler(database)
