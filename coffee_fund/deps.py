from functools import lru_cache

from coffee_fund.config import get_settings
from coffee_fund.db.repository import (
    Database,
    ProductRepository,
    TransactionRepository,
    UserRepository,
)
from coffee_fund.parsing.router import MessageRouter
from coffee_fund.services.ledger import LedgerService
from coffee_fund.services.messages import MessageHandler


def build_message_handler(database: Database) -> MessageHandler:
    products = ProductRepository(database)
    return MessageHandler(
        router=MessageRouter(products),
        catalog=products,
        users=UserRepository(database),
        ledger=LedgerService(TransactionRepository(database)),
    )


@lru_cache
def get_database() -> Database:
    return Database(get_settings().db_path)


def get_product_repo() -> ProductRepository:
    return ProductRepository(get_database())


def get_ledger() -> LedgerService:
    return LedgerService(TransactionRepository(get_database()))


@lru_cache
def get_message_handler() -> MessageHandler:
    return build_message_handler(get_database())
