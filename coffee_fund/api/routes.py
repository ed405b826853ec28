from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from coffee_fund.config import Settings, get_settings
from coffee_fund.db.loader import load_products
from coffee_fund.db.repository import ProductRepository
from coffee_fund.deps import get_ledger, get_message_handler, get_product_repo
from coffee_fund.errors import CatalogLoadError, StorageError
from coffee_fund.models.schemas import (
    Balance,
    Message,
    PostMessageRequest,
    Product,
    ReloadResult,
    Response,
    User,
)
from coffee_fund.services.ledger import LedgerService
from coffee_fund.services.messages import MessageHandler

router = APIRouter()


@router.post("/messages", response_model=list[Response])
def post_message(
    request: PostMessageRequest,
    handler: MessageHandler = Depends(get_message_handler),
):
    logger.info("Message from {}: {}", request.sender_id, request.text)
    message = Message(
        sender=User(id=request.sender_id, name=request.sender_name),
        contents=request.text,
    )
    return handler.handle_message(message)


@router.get("/products", response_model=list[Product])
def list_products(repo: ProductRepository = Depends(get_product_repo)):
    try:
        return repo.get_all()
    except StorageError as e:
        logger.error("Listing products failed: {}", e)
        raise HTTPException(status_code=500, detail="Could not read products")


@router.get("/balances", response_model=list[Balance])
def list_balances(ledger: LedgerService = Depends(get_ledger)):
    try:
        return ledger.get_balances()
    except StorageError as e:
        logger.error("Reading balances failed: {}", e)
        raise HTTPException(status_code=500, detail="Could not read balances")


@router.post("/products/reload", response_model=ReloadResult)
def reload_products(
    repo: ProductRepository = Depends(get_product_repo),
    settings: Settings = Depends(get_settings),
):
    path = settings.products_path
    try:
        loaded = load_products(path, repo)
    except (CatalogLoadError, StorageError) as e:
        logger.error("Reloading products failed: {}", e)
        raise HTTPException(status_code=500, detail="Could not reload products")
    return ReloadResult(loaded=loaded)
