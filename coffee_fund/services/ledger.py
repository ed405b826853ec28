from loguru import logger

from coffee_fund.models.schemas import Balance, LedgerEntry, Product
from coffee_fund.services.ports import LedgerStore


class LedgerService:
    def __init__(self, store: LedgerStore):
        self.store = store

    def record_purchase(self, product: Product, user_id: str) -> LedgerEntry:
        """Debit the buyer with the product's price."""
        entry = LedgerEntry(
            amount=-product.price,
            user_id=user_id,
            product_name=product.name,
        )
        self.store.append(entry)
        logger.info("Recorded purchase of {} for {} ({})", product.identifier, user_id, entry.amount)
        return entry

    def record_amount(self, amount: int, user_id: str) -> LedgerEntry:
        """Book ``amount`` as given: negative is a debit, positive a credit."""
        entry = LedgerEntry(amount=amount, user_id=user_id)
        self.store.append(entry)
        logger.info("Recorded amount {} for {}", amount, user_id)
        return entry

    def get_balances(self) -> list[Balance]:
        return list(self.store.aggregate())
