"""
Repository du panier.

Les lectures du panier rechargent systématiquement les lignes
(`populate_existing`): les mises à jour en masse sur `products` et
`cart_items` ne passent pas par la session et laisseraient sinon des
objets périmés dans l'identity map.
"""
import logging
from typing import Any, Dict, Optional

from fastcrud import FastCRUD
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from agromarket.carts.models import Cart, CartItem, CartItemCreate
from agromarket.core.unit_of_work import UnitOfWork
from agromarket.products.models import Product

logger = logging.getLogger(__name__)

crud_cart_item = FastCRUD(CartItem)


class CartRepository:
    """Accès au panier et à ses lignes."""

    async def find_by_owner(self, session: AsyncSession, owner_id: int) -> Optional[Cart]:
        """Panier de l'utilisateur avec ses lignes et les produits associés."""
        stmt = (
            select(Cart)
            .where(Cart.user_id == owner_id)
            .options(
                selectinload(Cart.items).selectinload(CartItem.product).selectinload(Product.category),
                selectinload(Cart.items).selectinload(CartItem.product).selectinload(Product.producer),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, uow: UnitOfWork, owner_id: int) -> Cart:
        result = await uow.session.execute(select(Cart).where(Cart.user_id == owner_id))
        cart = result.scalar_one_or_none()
        if cart is None:
            cart = Cart(user_id=owner_id)
            uow.session.add(cart)
            await uow.flush()
            logger.info(f"[CartRepository] Panier créé pour l'utilisateur {owner_id} (ID: {cart.id})")
        return cart

    async def get_line(self, session: AsyncSession, cart_id: int, product_id: int) -> Optional[Dict[str, Any]]:
        return await crud_cart_item.get(db=session, cart_id=cart_id, product_id=product_id)

    async def add_line(self, uow: UnitOfWork, cart_id: int, product_id: int, quantity: int) -> None:
        await crud_cart_item.create(
            db=uow.session,
            object=CartItemCreate(cart_id=cart_id, product_id=product_id, quantity=quantity),
            commit=False,
        )

    async def set_line_quantity(self, uow: UnitOfWork, line_id: int, quantity: int) -> None:
        await crud_cart_item.update(db=uow.session, object={"quantity": quantity}, commit=False, id=line_id)

    async def delete_line(self, uow: UnitOfWork, line_id: int) -> None:
        await crud_cart_item.db_delete(db=uow.session, commit=False, id=line_id)

    async def delete_lines(self, uow: UnitOfWork, cart_id: int) -> int:
        """Supprime toutes les lignes du panier; le panier lui-même est conservé."""
        result = await uow.session.execute(
            delete(CartItem).where(CartItem.cart_id == cart_id).execution_options(synchronize_session=False)
        )
        logger.debug(f"[CartRepository] {result.rowcount} ligne(s) supprimée(s) du panier {cart_id}")
        return result.rowcount
