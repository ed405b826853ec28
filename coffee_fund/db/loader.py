import json
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from coffee_fund.db.repository import ProductRepository
from coffee_fund.errors import CatalogLoadError
from coffee_fund.models.schemas import Product

_products_adapter = TypeAdapter(list[Product])


def read_products(path: str | Path) -> list[Product]:
    """Read a JSON list of ``{identifier, name, price}`` objects."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return _products_adapter.validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise CatalogLoadError(f"Could not load products from {path}: {e}") from e


def load_products(path: str | Path, repo: ProductRepository) -> int:
    """Replace the catalog with the contents of the products file."""
    products = read_products(path)
    identifiers = [p.identifier for p in products]
    if len(set(identifiers)) != len(identifiers):
        raise CatalogLoadError(f"Duplicate product identifiers in {path}")

    count = repo.replace_all(products)
    logger.info("Loaded {} products from {}", count, path)
    return count
