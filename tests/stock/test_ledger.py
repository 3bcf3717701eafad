import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.core.unit_of_work import UnitOfWork
from agromarket.stock.exceptions import InsufficientStockError, InvalidStockMovementError
from agromarket.stock.service import StockLedger

from tests.conftest import stock_of


@pytest.mark.asyncio
async def test_decrement_and_increment(db_session: AsyncSession, tomatoes):
    ledger = StockLedger()
    async with UnitOfWork(db_session) as uow:
        await ledger.decrement(uow, tomatoes.id, 4, tomatoes.name)
    assert await stock_of(db_session, tomatoes.id) == 6

    async with UnitOfWork(db_session) as uow:
        await ledger.increment(uow, tomatoes.id, 4)
    assert await stock_of(db_session, tomatoes.id) == 10


@pytest.mark.asyncio
async def test_decrement_to_zero_allowed(db_session: AsyncSession, tomatoes):
    async with UnitOfWork(db_session) as uow:
        await StockLedger().decrement(uow, tomatoes.id, 10)
    assert await stock_of(db_session, tomatoes.id) == 0


@pytest.mark.asyncio
async def test_decrement_never_goes_negative(db_session: AsyncSession, tomatoes):
    with pytest.raises(InsufficientStockError) as exc_info:
        async with UnitOfWork(db_session) as uow:
            await StockLedger().decrement(uow, tomatoes.id, 11, "Tomates")

    assert exc_info.value.available == 10
    assert exc_info.value.requested == 11
    assert exc_info.value.message == "Stock insuffisant pour Tomates. Disponible: 10"
    assert await stock_of(db_session, tomatoes.id) == 10


@pytest.mark.asyncio
async def test_failed_decrement_rolls_back_earlier_movements(db_session: AsyncSession, tomatoes, carrots):
    ledger = StockLedger()
    with pytest.raises(InsufficientStockError):
        async with UnitOfWork(db_session) as uow:
            await ledger.decrement(uow, carrots.id, 5)
            await ledger.decrement(uow, tomatoes.id, 50)

    assert await stock_of(db_session, carrots.id) == 10


@pytest.mark.asyncio
async def test_increment_unknown_product_is_ignored(db_session: AsyncSession):
    async with UnitOfWork(db_session) as uow:
        await StockLedger().increment(uow, 12345, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -3])
async def test_non_positive_amount_rejected(db_session: AsyncSession, tomatoes, amount):
    with pytest.raises(InvalidStockMovementError):
        async with UnitOfWork(db_session) as uow:
            await StockLedger().decrement(uow, tomatoes.id, amount)
