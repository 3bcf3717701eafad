import logging
from typing import Annotated

from fastapi import Depends

from agromarket.database import DbSessionDep
from agromarket.orders.service import OrderService
from agromarket.stock.dependencies import StockLedgerDep

logger = logging.getLogger(__name__)


def get_order_service(db: DbSessionDep, stock_ledger: StockLedgerDep) -> OrderService:
    """Fournit une instance d'OrderService liée à la session de la requête."""
    return OrderService(db=db, stock_ledger=stock_ledger)


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
