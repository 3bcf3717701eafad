"""
Implémentation SQLAlchemy du repository des commandes.

Les lectures reçoivent une session, les écritures l'UnitOfWork de la
transaction en cours. Toutes les lectures d'entités utilisent
`populate_existing`: les mises à jour en masse (statut, stock) ne
synchronisent pas l'identity map.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from agromarket.core.unit_of_work import UnitOfWork
from agromarket.core.utils import utcnow
from agromarket.orders.config import CANCELLABLE_ORDER_STATUS, FINALIZED_ORDER_STATUS, ORDER_STATUS_CANCELLED
from agromarket.orders.domain.entities import OrderDraft
from agromarket.orders.models import Order, OrderItem
from agromarket.products.models import Product

logger = logging.getLogger(__name__)


def _detail_options():
    """Chargement des lignes avec produit, catégorie et producteur."""
    return (
        selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.category),
        selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.producer),
    )


def _contains_producer_products(producer_id: int):
    """Condition corrélée: la commande contient au moins un produit du producteur."""
    return (
        select(OrderItem.id)
        .join(Product, Product.id == OrderItem.product_id)
        .where(OrderItem.order_id == Order.id, Product.producer_id == producer_id)
        .exists()
    )


class SQLAlchemyOrderRepository:
    """Accès aux commandes et à leurs lignes."""

    # --- Lectures ---

    async def get_with_details(self, session: AsyncSession, order_id: int) -> Optional[Order]:
        stmt = (
            select(Order)
            .where(Order.id == order_id)
            .options(*_detail_options())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_buyer(
        self, session: AsyncSession, order_id: int, buyer_id: int, for_update: bool = False
    ) -> Optional[Order]:
        """Commande de l'acheteur, avec ses lignes. `for_update` verrouille la ligne de commande."""
        stmt = select(Order).where(Order.id == order_id, Order.buyer_id == buyer_id).options(*_detail_options())
        if for_update:
            stmt = stmt.with_for_update(of=Order)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def get_for_producer(
        self, session: AsyncSession, order_id: int, producer_id: int, for_update: bool = False
    ) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id, _contains_producer_products(producer_id))
        if for_update:
            stmt = stmt.with_for_update(of=Order)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def list_by_buyer(
        self,
        session: AsyncSession,
        buyer_id: int,
        offset: int = 0,
        limit: int = 10,
        status: Optional[str] = None,
    ) -> Tuple[List[Order], int]:
        """Commandes de l'acheteur, les plus récentes d'abord, et leur nombre total."""
        conditions = [Order.buyer_id == buyer_id]
        if status:
            conditions.append(Order.status == status)
        return await self._paginate(session, conditions, offset, limit)

    async def list_sales_for_producer(
        self,
        session: AsyncSession,
        producer_id: int,
        offset: int = 0,
        limit: int = 10,
        status: Optional[str] = None,
    ) -> Tuple[List[Order], int]:
        """Commandes contenant au moins un produit du producteur."""
        conditions = [_contains_producer_products(producer_id)]
        if status:
            conditions.append(Order.status == status)
        return await self._paginate(session, conditions, offset, limit, with_buyer=True)

    async def _paginate(
        self,
        session: AsyncSession,
        conditions: list,
        offset: int,
        limit: int,
        with_buyer: bool = False,
    ) -> Tuple[List[Order], int]:
        total = await session.scalar(select(func.count(Order.id)).where(*conditions)) or 0

        options = list(_detail_options())
        if with_buyer:
            options.append(selectinload(Order.buyer))
        stmt = (
            select(Order)
            .where(*conditions)
            .options(*options)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all()), total

    # --- Écritures (dans la transaction de l'appelant) ---

    async def create_order_with_items(
        self,
        uow: UnitOfWork,
        buyer_id: int,
        draft: OrderDraft,
        delivery_address: Dict[str, Any],
        notes: Optional[str] = None,
    ) -> Order:
        """Insère la commande (statut pending) puis une ligne par ligne validée."""
        order = Order(
            buyer_id=buyer_id,
            total_amount=draft.total_amount,
            delivery_address=delivery_address,
            notes=notes,
        )
        uow.session.add(order)
        await uow.flush()

        for line in draft.lines:
            uow.session.add(OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                subtotal=line.subtotal,
            ))
        await uow.flush()
        logger.debug(f"[OrderRepository] Commande {order.id} insérée avec {len(draft.lines)} ligne(s)")
        return order

    async def mark_cancelled(self, uow: UnitOfWork, order_id: int) -> int:
        """Passe la commande à `cancelled` si elle est encore annulable. Retourne les lignes affectées."""
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status.in_(sorted(CANCELLABLE_ORDER_STATUS)))
            .values(status=ORDER_STATUS_CANCELLED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await uow.session.execute(stmt)
        return result.rowcount

    async def update_status(self, uow: UnitOfWork, order_id: int, values: Dict[str, Any]) -> int:
        """Applique `values` si la commande n'est pas finalisée. Retourne les lignes affectées."""
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status.not_in(sorted(FINALIZED_ORDER_STATUS)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await uow.session.execute(stmt)
        return result.rowcount
