from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.addresses.models import Address
from agromarket.carts.models import Cart, CartItem
from agromarket.core.unit_of_work import UnitOfWork
from agromarket.core.utils import as_utc, utcnow
from agromarket.orders.models import Order, OrderItem
from agromarket.products.models import Product
from agromarket.stock.service import StockLedger
from agromarket.users.models import User


def test_utcnow_is_timezone_aware():
    now = utcnow()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_as_utc():
    assert as_utc(None) is None
    assert as_utc(datetime(2030, 1, 1, 12, 0)) == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    plus_one = timezone(timedelta(hours=1))
    assert as_utc(datetime(2030, 1, 1, 12, 0, tzinfo=plus_one)) == datetime(2030, 1, 1, 11, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("model", [User, Address, Product, Cart, CartItem, Order, OrderItem])
def test_datetime_columns_store_timezone(model):
    columns = [c for c in model.__table__.columns if c.name.endswith("_at")]
    assert columns
    for column in columns:
        assert column.type.timezone is True, f"{model.__tablename__}.{column.name}"


@pytest.mark.asyncio
async def test_stock_update_writes_timestamp(db_session: AsyncSession, tomatoes):
    async with UnitOfWork(db_session) as uow:
        await StockLedger().decrement(uow, tomatoes.id, 1, tomatoes.name)

    updated_at = await db_session.scalar(select(Product.updated_at).where(Product.id == tomatoes.id))
    assert updated_at is not None
