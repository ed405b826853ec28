from loguru import logger

from coffee_fund.errors import ClassifyError, StorageError
from coffee_fund.models.schemas import (
    AmountAction,
    Balance,
    Command,
    CommandAction,
    Message,
    Product,
    ProductAction,
    Response,
    User,
)
from coffee_fund.parsing.currency import format_amount
from coffee_fund.parsing.router import MessageRouter
from coffee_fund.services.ledger import LedgerService
from coffee_fund.services.ports import ProductCatalog, UserDirectory

INVALID_INPUT = "Invalid input"
PRODUCTS_HEADER = "Available products:"
STATS_HEADER = "Current stats:"

# Error codes shown to the user, one per failing step.
ERROR_CLASSIFY = 1
ERROR_COMMAND = 2
ERROR_USER = 3
ERROR_LEDGER = 4


def _internal_error(code: int) -> list[Response]:
    return [Response(contents=f"Internal error ({code})")]


def format_products(products: list[Product]) -> str:
    lines = [PRODUCTS_HEADER]
    for product in products:
        lines.append(f"/{product.identifier} - {product.name} ({format_amount(product.price)})")
    return "\n".join(lines)


def format_balances(balances: list[Balance], sender: User) -> str:
    """List every balance, the sender's own line in bold."""
    lines = [STATS_HEADER]
    for balance in balances:
        line = f"- {balance.name} ({format_amount(balance.amount)})"
        if balance.user_id == sender.id:
            line = f"**{line}**"
        lines.append(line)
    return "\n".join(lines)


class MessageHandler:
    """Turns one chat message into the replies to send back."""

    def __init__(
        self,
        router: MessageRouter,
        catalog: ProductCatalog,
        users: UserDirectory,
        ledger: LedgerService,
    ):
        self.router = router
        self.catalog = catalog
        self.users = users
        self.ledger = ledger

    def handle_message(self, message: Message) -> list[Response]:
        try:
            action = self.router.route(message.contents)
        except ClassifyError as e:
            logger.error("Could not classify message from {}: {}", message.sender.id, e)
            return _internal_error(ERROR_CLASSIFY)

        if action is None:
            return [Response(contents=INVALID_INPUT)]

        if isinstance(action, CommandAction):
            return self._handle_command(action.command, message.sender)

        return self._handle_booking(action, message.sender)

    def _handle_command(self, command: Command, sender: User) -> list[Response]:
        try:
            if command == Command.LIST_AVAILABLE_ITEMS:
                contents = format_products(list(self.catalog.get_all()))
            else:
                contents = format_balances(self.ledger.get_balances(), sender)
        except StorageError as e:
            logger.error("Command {} failed: {}", command.name, e)
            return _internal_error(ERROR_COMMAND)

        return [Response(contents=contents)]

    def _handle_booking(self, action: ProductAction | AmountAction, sender: User) -> list[Response]:
        # The user record is written first; if the ledger append then fails
        # the updated name stays without an entry.
        try:
            self.users.upsert(sender)
        except StorageError as e:
            logger.error("Could not store user {}: {}", sender.id, e)
            return _internal_error(ERROR_USER)

        try:
            if isinstance(action, ProductAction):
                self.ledger.record_purchase(action.product, sender.id)
                confirmation = f"Recorded {action.product.name}"
            else:
                self.ledger.record_amount(action.amount, sender.id)
                confirmation = f"Recorded {format_amount(action.amount)}"
        except StorageError as e:
            logger.error("Could not record entry for {}: {}", sender.id, e)
            return _internal_error(ERROR_LEDGER)

        responses = [Response(contents=confirmation)]

        try:
            balances = self.ledger.get_balances()
        except StorageError as e:
            logger.warning("Balances unavailable after recording for {}: {}", sender.id, e)
            return responses

        responses.append(Response(contents=format_balances(balances, sender)))
        return responses
