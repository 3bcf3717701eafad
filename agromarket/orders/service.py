"""
Service des commandes.

`create_order` est la transaction centrale du marketplace: lecture du panier,
résolution de l'adresse, instantané du catalogue, assemblage, insertion de la
commande, décrément du stock et vidage du panier s'exécutent dans une seule
UnitOfWork. Toute erreur annule l'ensemble: aucune commande, aucun mouvement
de stock ni aucune modification du panier ne reste visible.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.addresses.exceptions import AddressNotFoundError, NoDeliveryAddressError
from agromarket.addresses.models import AddressRead
from agromarket.addresses.repositories import AddressRepository
from agromarket.addresses.utils import build_address_snapshot
from agromarket.carts.exceptions import EmptyCartError
from agromarket.carts.models import Cart
from agromarket.carts.repositories import CartRepository
from agromarket.core.unit_of_work import UnitOfWork
from agromarket.orders.config import ALLOWED_ORDER_STATUS
from agromarket.orders.domain.assembler import assemble_order
from agromarket.orders.domain.entities import CartLine
from agromarket.orders.domain.lifecycle import build_status_update, can_cancel, validate_target_status
from agromarket.orders.exceptions import (
    InvalidStatusError,
    OrderAlreadyFinalizedError,
    OrderNotCancellableError,
    OrderNotFoundError,
)
from agromarket.orders.models import Order, OrderCreate, OrderItemRead, SaleRead
from agromarket.orders.repositories import SQLAlchemyOrderRepository
from agromarket.products.repositories import CatalogRepository
from agromarket.stock.service import StockLedger

logger = logging.getLogger(__name__)


def to_cart_lines(cart: Optional[Cart]) -> List[CartLine]:
    if cart is None:
        return []
    return [CartLine(product_id=item.product_id, quantity=item.quantity) for item in sorted(cart.items, key=lambda i: i.id)]


class OrderService:
    """Orchestration des opérations sur les commandes."""

    def __init__(
        self,
        db: AsyncSession,
        order_repository: Optional[SQLAlchemyOrderRepository] = None,
        cart_repository: Optional[CartRepository] = None,
        address_repository: Optional[AddressRepository] = None,
        catalog: Optional[CatalogRepository] = None,
        stock_ledger: Optional[StockLedger] = None,
    ):
        self.db = db
        self.order_repository = order_repository or SQLAlchemyOrderRepository()
        self.cart_repository = cart_repository or CartRepository()
        self.address_repository = address_repository or AddressRepository()
        self.catalog = catalog or CatalogRepository()
        self.stock_ledger = stock_ledger or StockLedger()
        logger.debug("[OrderService] Initialisé.")

    async def create_order(self, buyer_id: int, order_data: OrderCreate) -> Order:
        """Transforme le panier de l'acheteur en commande.

        Raises:
            EmptyCartError, AddressNotFoundError, NoDeliveryAddressError,
            ProductUnavailableError, InsufficientStockError, TransactionFailureError
        """
        logger.info(f"[OrderService] Création commande pour l'utilisateur {buyer_id}")

        async with UnitOfWork(self.db) as uow:
            cart = await self.cart_repository.find_by_owner(uow.session, buyer_id)
            lines = to_cart_lines(cart)
            if not lines:
                logger.warning(f"[OrderService] Panier vide pour l'utilisateur {buyer_id}")
                raise EmptyCartError()

            address = await self._resolve_address(uow, buyer_id, order_data.address_id)

            snapshots = await self.catalog.find_snapshots(uow, [line.product_id for line in lines])
            draft = assemble_order(lines, snapshots)

            order = await self.order_repository.create_order_with_items(
                uow,
                buyer_id=buyer_id,
                draft=draft,
                delivery_address=build_address_snapshot(address),
                notes=order_data.notes,
            )
            order_id = order.id

            for line in draft.lines:
                await self.stock_ledger.decrement(uow, line.product_id, line.quantity, line.product_name)

            await self.cart_repository.delete_lines(uow, cart.id)

        logger.info(
            f"[OrderService] Commande {order_id} créée pour l'utilisateur {buyer_id}. Total: {draft.total_amount}"
        )
        return await self.order_repository.get_with_details(self.db, order_id)

    async def cancel_order(self, buyer_id: int, order_id: int) -> Order:
        """Annule une commande pending/confirmed de l'acheteur et restitue le stock."""
        logger.info(f"[OrderService] Annulation commande {order_id} par l'utilisateur {buyer_id}")

        async with UnitOfWork(self.db) as uow:
            order = await self.order_repository.get_for_buyer(uow.session, order_id, buyer_id, for_update=True)
            if order is None:
                raise OrderNotFoundError(order_id)

            # Vérifié après l'acquisition du verrou sur la commande
            if not can_cancel(order.status):
                logger.warning(f"[OrderService] Commande {order_id} non annulable (statut: {order.status})")
                raise OrderNotCancellableError(order_id, order.status)

            status_before = order.status
            # Même ordre de verrouillage des produits que la création de commande
            restocks = sorted(((item.product_id, item.quantity) for item in order.items), key=lambda r: r[0])

            if await self.order_repository.mark_cancelled(uow, order_id) == 0:
                # Transition concurrente survenue entre la lecture et la mise à jour
                raise OrderNotCancellableError(order_id, status_before)

            for product_id, quantity in restocks:
                await self.stock_ledger.increment(uow, product_id, quantity)

        logger.info(f"[OrderService] Commande {order_id} annulée, {len(restocks)} ligne(s) restockée(s)")
        return await self.order_repository.get_with_details(self.db, order_id)

    async def update_order_status(
        self, producer_id: int, order_id: int, status: str, expected_delivery_at: Optional[datetime] = None
    ) -> Order:
        """Fait progresser une commande contenant des produits du producteur."""
        validate_target_status(status)
        logger.info(f"[OrderService] MAJ statut commande {order_id} -> '{status}' par le producteur {producer_id}")

        async with UnitOfWork(self.db) as uow:
            order = await self.order_repository.get_for_producer(uow.session, order_id, producer_id, for_update=True)
            if order is None:
                raise OrderNotFoundError(order_id)

            current = order.status
            values = build_status_update(order_id, current, status, expected_delivery_at=expected_delivery_at)
            if await self.order_repository.update_status(uow, order_id, values) == 0:
                raise OrderAlreadyFinalizedError(order_id, current)

        return await self.order_repository.get_with_details(self.db, order_id)

    async def get_order(self, buyer_id: int, order_id: int) -> Order:
        order = await self.order_repository.get_for_buyer(self.db, order_id, buyer_id)
        if order is None:
            logger.debug(f"[OrderService] Commande {order_id} non trouvée pour l'utilisateur {buyer_id}")
            raise OrderNotFoundError(order_id)
        return order

    async def list_buyer_orders(
        self, buyer_id: int, page: int, limit: int, status: Optional[str] = None
    ) -> Tuple[List[Order], int]:
        self._check_status_filter(status)
        return await self.order_repository.list_by_buyer(
            self.db, buyer_id, offset=(page - 1) * limit, limit=limit, status=status
        )

    async def list_producer_sales(
        self, producer_id: int, page: int, limit: int, status: Optional[str] = None
    ) -> Tuple[List[SaleRead], int]:
        """Ventes du producteur; chaque commande ne liste que les lignes de ses produits."""
        self._check_status_filter(status)
        orders, total = await self.order_repository.list_sales_for_producer(
            self.db, producer_id, offset=(page - 1) * limit, limit=limit, status=status
        )

        sales = []
        for order in orders:
            sale = SaleRead.model_validate(order)
            sale.items = [
                OrderItemRead.model_validate(item)
                for item in order.items
                if item.product is not None and item.product.producer_id == producer_id
            ]
            sales.append(sale)
        return sales, total

    # --- Méthodes internes ---

    async def _resolve_address(self, uow: UnitOfWork, buyer_id: int, address_id: Optional[int]) -> AddressRead:
        if address_id is not None:
            address = await self.address_repository.find_by_id(uow.session, address_id, buyer_id)
            if address is None:
                logger.warning(f"[OrderService] Adresse {address_id} introuvable pour l'utilisateur {buyer_id}")
                raise AddressNotFoundError(address_id)
            return address

        address = await self.address_repository.find_default(uow.session, buyer_id)
        if address is None:
            raise NoDeliveryAddressError(buyer_id)
        return address

    @staticmethod
    def _check_status_filter(status: Optional[str]) -> None:
        if status is not None and status not in ALLOWED_ORDER_STATUS:
            raise InvalidStatusError(status, ALLOWED_ORDER_STATUS)
