from typing import Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.core.utils import utcnow
from agromarket.products.models import Product

logger = logging.getLogger(__name__)


async def get_stock_quantity(db: AsyncSession, product_id: int) -> Optional[int]:
    """Lit la quantité en stock courante d'un produit (None si le produit n'existe pas)."""
    result = await db.execute(select(Product.stock_quantity).where(Product.id == product_id))
    return result.scalar_one_or_none()


async def decrement_stock(db: AsyncSession, product_id: int, amount: int) -> int:
    """Retire `amount` du stock en une seule instruction conditionnelle.

    `UPDATE products SET stock_quantity = stock_quantity - :amount
    WHERE id = :id AND stock_quantity >= :amount`

    Retourne le nombre de lignes affectées (0 si le stock est insuffisant).
    """
    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= amount)
        .values(stock_quantity=Product.stock_quantity - amount, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount


async def increment_stock(db: AsyncSession, product_id: int, amount: int) -> int:
    """Rend `amount` au stock d'un produit. Retourne le nombre de lignes affectées."""
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=Product.stock_quantity + amount, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount
