"""Storage interfaces the message handling depends on.

Implementations raise ``StorageError`` when the underlying store fails.
"""

from typing import Protocol, Sequence

from coffee_fund.models.schemas import Balance, LedgerEntry, Product, User


class ProductCatalog(Protocol):
    def get(self, identifier: str) -> Product | None:
        ...

    def get_all(self) -> Sequence[Product]:
        ...


class UserDirectory(Protocol):
    def upsert(self, user: User) -> None:
        ...


class LedgerStore(Protocol):
    def append(self, entry: LedgerEntry) -> None:
        ...

    def aggregate(self) -> Sequence[Balance]:
        ...
