"""
Service du panier.

Les vérifications de stock faites ici sont indicatives: le stock est
revalidé sous transaction au moment de la commande.
"""
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.carts.exceptions import CartItemNotFoundError
from agromarket.carts.models import Cart, CartItemRead, CartRead
from agromarket.carts.repositories import CartRepository
from agromarket.core.unit_of_work import UnitOfWork
from agromarket.core.utils import round_money
from agromarket.products.exceptions import ProductNotFoundError
from agromarket.products.models import Product, ProductSummary
from agromarket.products.repositories import CatalogRepository
from agromarket.products.utils import compute_final_price, effective_discount
from agromarket.stock.exceptions import InsufficientStockError

logger = logging.getLogger(__name__)


class CartService:
    """Gestion du panier d'un consommateur."""

    def __init__(
        self,
        db: AsyncSession,
        cart_repository: Optional[CartRepository] = None,
        catalog: Optional[CatalogRepository] = None,
    ):
        self.db = db
        self.cart_repository = cart_repository or CartRepository()
        self.catalog = catalog or CatalogRepository()

    async def get_cart(self, user_id: int) -> CartRead:
        cart = await self.cart_repository.find_by_owner(self.db, user_id)
        if cart is None:
            async with UnitOfWork(self.db) as uow:
                await self.cart_repository.get_or_create(uow, user_id)
            cart = await self.cart_repository.find_by_owner(self.db, user_id)
        return self._to_read(cart)

    async def add_item(self, user_id: int, product_id: int, quantity: int) -> CartRead:
        """Ajoute un produit au panier ou augmente la quantité de la ligne existante."""
        logger.info(f"[CartService] Ajout produit {product_id} x{quantity} au panier de l'utilisateur {user_id}")
        product = await self._get_active_product(product_id)

        async with UnitOfWork(self.db) as uow:
            cart = await self.cart_repository.get_or_create(uow, user_id)
            line = await self.cart_repository.get_line(uow.session, cart.id, product_id)
            new_quantity = quantity + (line["quantity"] if line else 0)
            self._check_stock(product, new_quantity)
            if line:
                await self.cart_repository.set_line_quantity(uow, line["id"], new_quantity)
            else:
                await self.cart_repository.add_line(uow, cart.id, product_id, quantity)

        return await self.get_cart(user_id)

    async def update_item(self, user_id: int, product_id: int, quantity: int) -> CartRead:
        logger.info(f"[CartService] MAJ quantité produit {product_id} -> {quantity} (utilisateur {user_id})")
        async with UnitOfWork(self.db) as uow:
            line = await self._get_line(uow, user_id, product_id)
            product = await self._get_active_product(product_id)
            self._check_stock(product, quantity)
            await self.cart_repository.set_line_quantity(uow, line["id"], quantity)

        return await self.get_cart(user_id)

    async def remove_item(self, user_id: int, product_id: int) -> CartRead:
        logger.info(f"[CartService] Retrait produit {product_id} du panier de l'utilisateur {user_id}")
        async with UnitOfWork(self.db) as uow:
            line = await self._get_line(uow, user_id, product_id)
            await self.cart_repository.delete_line(uow, line["id"])

        return await self.get_cart(user_id)

    async def clear(self, user_id: int) -> None:
        async with UnitOfWork(self.db) as uow:
            cart = await self.cart_repository.get_or_create(uow, user_id)
            await self.cart_repository.delete_lines(uow, cart.id)
        logger.info(f"[CartService] Panier vidé pour l'utilisateur {user_id}")

    # --- Méthodes internes ---

    async def _get_active_product(self, product_id: int) -> Product:
        product = await self.catalog.get_active(self.db, product_id)
        if product is None:
            logger.warning(f"[CartService] Produit {product_id} introuvable ou inactif")
            raise ProductNotFoundError(product_id)
        return product

    async def _get_line(self, uow: UnitOfWork, user_id: int, product_id: int):
        cart = await self.cart_repository.get_or_create(uow, user_id)
        line = await self.cart_repository.get_line(uow.session, cart.id, product_id)
        if line is None:
            raise CartItemNotFoundError(product_id)
        return line

    @staticmethod
    def _check_stock(product: Product, quantity: int) -> None:
        if quantity > product.stock_quantity:
            raise InsufficientStockError(
                product_name=product.name,
                available=product.stock_quantity,
                product_id=product.id,
                requested=quantity,
            )

    @staticmethod
    def _to_read(cart: Cart) -> CartRead:
        items = []
        for item in sorted(cart.items, key=lambda i: i.id):
            product = item.product
            unit_price = compute_final_price(
                product.price, effective_discount(product.on_sale, product.discount_percent)
            )
            items.append(CartItemRead(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=unit_price,
                subtotal=round_money(unit_price * item.quantity),
                stock_quantity=product.stock_quantity,
                product=ProductSummary.model_validate(product),
            ))
        total = round_money(sum((i.subtotal for i in items), Decimal("0")))
        return CartRead(id=cart.id, items=items, item_count=sum(i.quantity for i in items), total=total)
