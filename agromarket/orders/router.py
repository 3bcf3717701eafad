import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status

from agromarket.auth.dependencies import CurrentConsumer, CurrentProducer
from agromarket.core.pagination import PageParamsDep
from agromarket.core.schemas import ApiResponse, PaginationMeta
from agromarket.orders.dependencies import OrderServiceDep
from agromarket.orders.models import OrderCreate, OrderRead, OrderStatusUpdate, SaleRead

logger = logging.getLogger(__name__)

order_router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
)


@order_router.post(
    "",
    response_model=ApiResponse[OrderRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_order_endpoint(service: OrderServiceDep, current_user: CurrentConsumer, order_data: OrderCreate):
    """Crée une commande à partir du panier du consommateur connecté."""
    order = await service.create_order(buyer_id=current_user.id, order_data=order_data)
    return ApiResponse(message="Commande créée avec succès", data=OrderRead.model_validate(order))


@order_router.get("", response_model=ApiResponse[List[OrderRead]], response_model_exclude_none=True)
async def list_orders_endpoint(
    service: OrderServiceDep,
    current_user: CurrentConsumer,
    page_params: PageParamsDep,
    status_filter: Optional[str] = Query(default=None, alias="status"),
):
    """Liste paginée des commandes du consommateur, les plus récentes d'abord."""
    orders, total = await service.list_buyer_orders(
        current_user.id, page=page_params.page, limit=page_params.limit, status=status_filter
    )
    return ApiResponse(
        message="Commandes récupérées avec succès",
        data=[OrderRead.model_validate(order) for order in orders],
        pagination=PaginationMeta.build(page_params.page, page_params.limit, total),
    )


# Déclarée avant /{order_id} pour ne pas être capturée par le paramètre de chemin
@order_router.get("/sales/my", response_model=ApiResponse[List[SaleRead]], response_model_exclude_none=True)
async def list_my_sales_endpoint(
    service: OrderServiceDep,
    current_user: CurrentProducer,
    page_params: PageParamsDep,
    status_filter: Optional[str] = Query(default=None, alias="status"),
):
    """Commandes contenant au moins un produit du producteur connecté."""
    sales, total = await service.list_producer_sales(
        current_user.id, page=page_params.page, limit=page_params.limit, status=status_filter
    )
    return ApiResponse(
        message="Ventes récupérées avec succès",
        data=sales,
        pagination=PaginationMeta.build(page_params.page, page_params.limit, total),
    )


@order_router.get("/{order_id}", response_model=ApiResponse[OrderRead], response_model_exclude_none=True)
async def get_order_endpoint(service: OrderServiceDep, current_user: CurrentConsumer, order_id: int):
    order = await service.get_order(buyer_id=current_user.id, order_id=order_id)
    return ApiResponse(message="Commande récupérée avec succès", data=OrderRead.model_validate(order))


@order_router.put("/{order_id}/cancel", response_model=ApiResponse[OrderRead], response_model_exclude_none=True)
async def cancel_order_endpoint(service: OrderServiceDep, current_user: CurrentConsumer, order_id: int):
    order = await service.cancel_order(buyer_id=current_user.id, order_id=order_id)
    logger.info(f"Commande {order_id} annulée par l'utilisateur {current_user.id}.")
    return ApiResponse(message="Commande annulée avec succès", data=OrderRead.model_validate(order))


@order_router.put("/{order_id}/status", response_model=ApiResponse[OrderRead], response_model_exclude_none=True)
async def update_order_status_endpoint(
    service: OrderServiceDep,
    current_user: CurrentProducer,
    order_id: int,
    status_update: OrderStatusUpdate,
):
    """Met à jour le statut d'une commande contenant des produits du producteur."""
    order = await service.update_order_status(
        producer_id=current_user.id,
        order_id=order_id,
        status=status_update.status,
        expected_delivery_at=status_update.expected_delivery_at,
    )
    logger.info(f"Statut commande {order_id} mis à jour à '{status_update.status}' par le producteur {current_user.id}.")
    return ApiResponse(message="Statut de la commande mis à jour", data=OrderRead.model_validate(order))
