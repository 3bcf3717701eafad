from typing import Annotated

from fastapi import Depends

from agromarket.stock.service import StockLedger


def get_stock_ledger() -> StockLedger:
    return StockLedger()


StockLedgerDep = Annotated[StockLedger, Depends(get_stock_ledger)]
