from loguru import logger

from coffee_fund.errors import ClassifyError, ParseError, StorageError
from coffee_fund.models.schemas import (
    Action,
    AmountAction,
    Command,
    CommandAction,
    ProductAction,
)
from coffee_fund.parsing.currency import parse_amount
from coffee_fund.services.ports import ProductCatalog

COMMANDS = {
    "/list": Command.LIST_AVAILABLE_ITEMS,
    "/stats": Command.GET_CURRENT_STATS,
}


class MessageRouter:
    """Decides what a chat message asks for.

    Commands win over products, products win over amounts.
    """

    def __init__(self, catalog: ProductCatalog):
        self.catalog = catalog

    def route(self, text: str) -> Action | None:
        command = COMMANDS.get(text)
        if command is not None:
            logger.debug("Routed {!r} to command {}", text, command.name)
            return CommandAction(command=command)

        identifier = text[1:] if text.startswith("/") else text
        try:
            product = self.catalog.get(identifier)
        except StorageError as e:
            raise ClassifyError(f"Product lookup failed for {identifier!r}") from e
        if product is not None:
            logger.debug("Routed {!r} to product {}", text, product.identifier)
            return ProductAction(product=product)

        try:
            amount = parse_amount(text)
        except ParseError:
            logger.debug("No action for {!r}", text)
            return None

        logger.debug("Routed {!r} to amount {}", text, amount)
        return AmountAction(amount=amount)
