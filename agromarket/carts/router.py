import logging

from fastapi import APIRouter

from agromarket.auth.dependencies import CurrentConsumer
from agromarket.carts.dependencies import CartServiceDep
from agromarket.carts.models import CartItemAdd, CartItemQuantityUpdate, CartRead
from agromarket.core.schemas import ApiResponse

logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/cart", tags=["Cart"])


@cart_router.get("", response_model=ApiResponse[CartRead], response_model_exclude_none=True)
async def get_cart_endpoint(service: CartServiceDep, current_user: CurrentConsumer):
    """Panier du consommateur connecté, avec prix et stock courants."""
    cart = await service.get_cart(current_user.id)
    return ApiResponse(message="Panier récupéré avec succès", data=cart)


@cart_router.post("/items", response_model=ApiResponse[CartRead], response_model_exclude_none=True)
async def add_cart_item_endpoint(service: CartServiceDep, current_user: CurrentConsumer, item: CartItemAdd):
    cart = await service.add_item(current_user.id, item.product_id, item.quantity)
    return ApiResponse(message="Produit ajouté au panier", data=cart)


@cart_router.put("/items/{product_id}", response_model=ApiResponse[CartRead], response_model_exclude_none=True)
async def update_cart_item_endpoint(
    service: CartServiceDep,
    current_user: CurrentConsumer,
    product_id: int,
    update: CartItemQuantityUpdate,
):
    cart = await service.update_item(current_user.id, product_id, update.quantity)
    return ApiResponse(message="Quantité mise à jour", data=cart)


@cart_router.delete("/items/{product_id}", response_model=ApiResponse[CartRead], response_model_exclude_none=True)
async def remove_cart_item_endpoint(service: CartServiceDep, current_user: CurrentConsumer, product_id: int):
    cart = await service.remove_item(current_user.id, product_id)
    return ApiResponse(message="Produit retiré du panier", data=cart)


@cart_router.delete("", response_model=ApiResponse[None], response_model_exclude_none=True)
async def clear_cart_endpoint(service: CartServiceDep, current_user: CurrentConsumer):
    await service.clear(current_user.id)
    return ApiResponse(message="Panier vidé avec succès")
