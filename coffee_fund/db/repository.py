import threading
from contextlib import contextmanager

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage

from coffee_fund.errors import StorageError
from coffee_fund.models.schemas import Balance, LedgerEntry, Product, User


class Database:
    """Shared TinyDB handle. TinyDB is not thread-safe, so access is locked."""

    def __init__(self, db_path: str | None = "coffee_fund.json"):
        if db_path is None:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(db_path)
        self.lock = threading.RLock()

    def table(self, name: str):
        return self.db.table(name)

    @contextmanager
    def access(self, operation: str):
        """Hold the lock and report storage failures as ``StorageError``."""
        with self.lock:
            try:
                yield
            except (OSError, ValueError, KeyError) as e:
                raise StorageError(f"{operation} failed: {e}") from e

    def close(self) -> None:
        self.db.close()


class ProductRepository:
    def __init__(self, database: Database):
        self.database = database
        self.table = database.table("products")

    def get(self, identifier: str) -> Product | None:
        with self.database.access("product lookup"):
            doc = self.table.get(Query().identifier == identifier)
            if doc is None:
                return None
            return Product(**doc)

    def get_all(self) -> list[Product]:
        with self.database.access("product listing"):
            return [Product(**doc) for doc in self.table.all()]

    def replace_all(self, products: list[Product]) -> int:
        """Drop the current catalog and store ``products`` instead."""
        with self.database.access("catalog refresh"):
            self.table.truncate()
            self.table.insert_multiple(p.model_dump(mode="json") for p in products)
        return len(products)


class UserRepository:
    def __init__(self, database: Database):
        self.database = database
        self.table = database.table("users")

    def upsert(self, user: User) -> None:
        with self.database.access("user upsert"):
            self.table.upsert(user.model_dump(mode="json"), Query().id == user.id)

    def get(self, user_id: str) -> User | None:
        with self.database.access("user lookup"):
            doc = self.table.get(Query().id == user_id)
            if doc is None:
                return None
            return User(**doc)

    def get_all(self) -> list[User]:
        with self.database.access("user listing"):
            return [User(**doc) for doc in self.table.all()]


class TransactionRepository:
    def __init__(self, database: Database):
        self.database = database
        self.table = database.table("transactions")
        self.users = database.table("users")

    def append(self, entry: LedgerEntry) -> None:
        with self.database.access("transaction insert"):
            self.table.insert(entry.model_dump(mode="json"))

    def get_all(self) -> list[LedgerEntry]:
        with self.database.access("transaction listing"):
            return [LedgerEntry(**doc) for doc in self.table.all()]

    def aggregate(self) -> list[Balance]:
        """Sum every user's entries.

        Known users come first in the order they were stored, followed by
        ids that only appear in transactions.
        """
        with self.database.access("balance aggregation"):
            names: dict[str, str] = {}
            totals: dict[str, int] = {}
            for doc in self.users.all():
                names[doc["id"]] = doc["name"]
                totals[doc["id"]] = 0
            for doc in self.table.all():
                user_id = doc["user_id"]
                totals[user_id] = totals.get(user_id, 0) + doc["amount"]

        return [
            Balance(user_id=user_id, name=names.get(user_id, user_id), amount=amount)
            for user_id, amount in totals.items()
        ]
