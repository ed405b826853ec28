from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from coffee_fund.parsing.currency import parse_amount


class Product(BaseModel):
    identifier: str
    name: str
    price: int

    @field_validator("price", mode="before")
    @classmethod
    def parse_price_text(cls, value):
        """Allow prices written in the money notation, e.g. ``"1.20"``."""
        if isinstance(value, str):
            return parse_amount(value)
        return value


class User(BaseModel):
    id: str
    name: str


class LedgerEntry(BaseModel):
    amount: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str
    product_name: str | None = None


class Balance(BaseModel):
    user_id: str
    name: str
    amount: int


class Message(BaseModel):
    sender: User
    contents: str


class Response(BaseModel):
    contents: str


class Command(str, Enum):
    LIST_AVAILABLE_ITEMS = "list_available_items"
    GET_CURRENT_STATS = "get_current_stats"


class CommandAction(BaseModel):
    kind: Literal["command"] = "command"
    command: Command


class ProductAction(BaseModel):
    kind: Literal["product"] = "product"
    product: Product


class AmountAction(BaseModel):
    kind: Literal["amount"] = "amount"
    amount: int


Action = CommandAction | ProductAction | AmountAction


class PostMessageRequest(BaseModel):
    sender_id: str
    sender_name: str
    text: str


class ReloadResult(BaseModel):
    loaded: int
